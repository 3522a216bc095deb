import pytest

from clinic_billing.schemas.registration import RegistrationForm
from clinic_billing.scripts import print_bill


@pytest.fixture
def cli_db(monkeypatch, session_factory):
    monkeypatch.setattr(print_bill, "SessionLocal", session_factory)


def test_malformed_date_is_a_usage_error(tmp_path, capsys):
    out = tmp_path / "summary.pdf"

    with pytest.raises(SystemExit) as excinfo:
        print_bill.main(["--daily-summary", "19/10/2026", "--out", str(out)])

    assert excinfo.value.code == 2
    assert "--daily-summary" in capsys.readouterr().err
    assert not out.exists()


def test_daily_summary_is_written(cli_db, tmp_path):
    out = tmp_path / "summary.pdf"

    assert print_bill.main(["--daily-summary", "2026-10-19", "--out", str(out)]) == 0
    assert out.read_bytes().startswith(b"%PDF")


def test_stored_bill_is_reprinted(cli_db, workflow, tmp_path):
    result = workflow.submit(
        RegistrationForm(fullname="A", mobile="1", total_amount="500", paid_amount="200")
    )
    out = tmp_path / "bill.pdf"

    assert print_bill.main(["--patient-id", str(result.patient.id), "--out", str(out)]) == 0
    assert out.read_bytes().startswith(b"%PDF")
    assert print_bill.main(["--patient-id", "999", "--out", str(out)]) == 1
