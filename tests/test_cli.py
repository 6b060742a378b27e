from __future__ import annotations

import json

from ticket_summary.__main__ import main


def _write_tickets(tmp_path, records) -> str:
    path = tmp_path / "tickets.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return str(path)


def test_cli_writes_html_report(tmp_path, raw_ticket_records) -> None:
    source = _write_tickets(tmp_path, raw_ticket_records)
    output = tmp_path / "report.html"

    assert main([source, "--output", str(output)]) == 0

    html = output.read_text(encoding="utf-8")
    assert "Ticket Summary By-Team" in html
    assert "Alpha" in html


def test_cli_prints_message_envelope(tmp_path, raw_ticket_records, capsys, monkeypatch) -> None:
    monkeypatch.setenv("TICKET_SUMMARY_MAIL_TO", "ops@example.org")
    source = _write_tickets(tmp_path, raw_ticket_records)

    assert main([source, "--message"]) == 0

    message = json.loads(capsys.readouterr().out)
    assert message["to"] == "ops@example.org"
    assert set(message["body"]) == {"html", "text"}
    assert message["attachments"] == []
