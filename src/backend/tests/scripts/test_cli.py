import json

from scripts import render_document, run_record_sync


def test_sync_exits_nonzero_when_config_missing(monkeypatch, capsys):
    for name in ("ACE_API_BASE_URL", "ACE_API_TOKEN", "TABLE_FIELD_ID_INTERNAL", "TABLE_FIELD_ID_EXTERNAL"):
        monkeypatch.delenv(name, raising=False)

    code = run_record_sync.main(["42", "--no-dispatch"])

    assert code == 1
    assert "Missing required environment variable: ACE_API_BASE_URL" in capsys.readouterr().err


def test_sync_requires_table_field_ids(monkeypatch, capsys):
    monkeypatch.setenv("ACE_API_BASE_URL", "https://ace.example.com/api/v1")
    monkeypatch.setenv("ACE_API_TOKEN", "tok")
    monkeypatch.delenv("TABLE_FIELD_ID_INTERNAL", raising=False)

    code = run_record_sync.main(["42"])

    assert code == 1
    assert "TABLE_FIELD_ID_INTERNAL" in capsys.readouterr().err


def test_render_document_writes_pdf(tmp_path, capsys):
    record_path = tmp_path / "record.json"
    record_path.write_text(
        json.dumps(
            {
                "data": {
                    "id": "42",
                    "attributes": {
                        "pkey": "PO-42",
                        "cf_po_type": "External",
                        "cf_items_btpo_api2": json.dumps(
                            [{"name": "r1", "values": {"cf_item_desc_ext": "Tips", "cf_dollar_amount_external": "5"}}]
                        ),
                    },
                }
            }
        )
    )
    out_path = tmp_path / "po.pdf"

    code = render_document.main([str(record_path), "--template", "po", "--output", str(out_path), "--logo", ""])

    assert code == 0
    assert out_path.read_bytes().startswith(b"%PDF")
    assert str(out_path) in capsys.readouterr().out


def test_invalid_smtp_port_only_disables_dispatch(monkeypatch):
    monkeypatch.setenv("ACE_API_BASE_URL", "https://ace.example.com/api/v1")
    monkeypatch.setenv("ACE_API_TOKEN", "tok")
    monkeypatch.setenv("TABLE_FIELD_ID_INTERNAL", "77")
    monkeypatch.setenv("TABLE_FIELD_ID_EXTERNAL", "88")
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "abc")

    synchronizer = run_record_sync.build_synchronizer(template="invoice", dispatch=True)

    assert synchronizer is not None
