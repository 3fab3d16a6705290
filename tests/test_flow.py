import csv
import pathlib
import sys

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

import pytest

from seating_optimizer import cli, csv_loader, optimizer


GUESTS_CSV = """id,first_name,last_name,group,industry,interests,rsvp_status
a,Ann,Smith,Smith,,golf|wine,confirmed
b,Bob,Smith,Smith,,,confirmed
c,Cy,Jones,,Tech,Golf,pending
d,Di,Lee,,,,declined
"""

TABLES_CSV = """id,name,capacity
t1,Head,3
t2,Side,2
"""

RELATIONSHIPS_CSV = """guest_id,other_id,type,strength
c,a,friend,4
"""

CONSTRAINTS_CSV = """id,type,guest_ids,priority,description
k1,different_table,a|c,preferred,
k2,near_front,a|b,optional,close to the stage
"""


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "guests.csv").write_text(GUESTS_CSV)
    (tmp_path / "tables.csv").write_text(TABLES_CSV)
    (tmp_path / "relationships.csv").write_text(RELATIONSHIPS_CSV)
    (tmp_path / "constraints.csv").write_text(CONSTRAINTS_CSV)
    return tmp_path


def test_load_all(data_dir):
    guests, tables, constraints = csv_loader.load_all(
        data_dir / "guests.csv",
        data_dir / "tables.csv",
        data_dir / "relationships.csv",
        data_dir / "constraints.csv",
    )
    assert [g.id for g in guests] == ["a", "b", "c", "d"]
    ann, _, cy, di = guests
    assert ann.group == "Smith"
    assert ann.interests == ["golf", "wine"]
    assert ann.industry is None
    assert ann.relationships == []
    assert cy.group is None
    assert cy.rsvp_status == "pending"
    assert [(r.guest_id, r.type, r.strength) for r in cy.relationships] == [("a", "friend", 4.0)]
    assert di.rsvp_status == "declined"

    assert [(t.id, t.name, t.capacity) for t in tables] == [("t1", "Head", 3), ("t2", "Side", 2)]

    assert [c.id for c in constraints] == ["k1", "k2"]
    assert constraints[0].guest_ids == ["a", "c"]
    assert constraints[0].description == ""
    assert constraints[1].description == "close to the stage"


def test_full_flow(data_dir):
    guests, tables, constraints = csv_loader.load_all(
        data_dir / "guests.csv",
        data_dir / "tables.csv",
        data_dir / "relationships.csv",
        data_dir / "constraints.csv",
    )
    guests = csv_loader.attending(guests)
    assert [g.id for g in guests] == ["a", "b", "c"]

    result = optimizer.optimize(guests, tables, constraints)

    # c likes golf and Ann, so joins the Smiths
    assert result.assignments == {"a": "t1", "b": "t1", "c": "t1"}
    assert [v.kind for v in result.violations] == ["different_table"]
    assert result.violations[0].constraint_id == "k1"
    assert result.score == 93


def test_unknown_relationship_guest(tmp_path):
    (tmp_path / "guests.csv").write_text("id\na\nb\n")
    (tmp_path / "rels.csv").write_text("guest_id,other_id,type,strength\na,zed,friend,1\n")
    guests = csv_loader.load_guests(tmp_path / "guests.csv")
    with pytest.raises(ValueError, match="unknown guest"):
        csv_loader.load_relationships(tmp_path / "rels.csv", guests, {"a", "b"})


def test_duplicate_guest_rows(tmp_path):
    (tmp_path / "guests.csv").write_text("id\na\na\n")
    with pytest.raises(ValueError, match="duplicate"):
        csv_loader.load_guests(tmp_path / "guests.csv")


def test_duplicate_table_rows(tmp_path):
    (tmp_path / "tables.csv").write_text("id,capacity\nt1,2\nt1,2\n")
    with pytest.raises(ValueError, match="duplicate table id"):
        csv_loader.load_tables(tmp_path / "tables.csv")


def test_blank_table_id(tmp_path):
    (tmp_path / "tables.csv").write_text("id,capacity\n,4\n")
    with pytest.raises(ValueError, match="without an id"):
        csv_loader.load_tables(tmp_path / "tables.csv")


def test_bad_relationship_strength(tmp_path):
    (tmp_path / "guests.csv").write_text("id\na\nb\n")
    (tmp_path / "rels.csv").write_text("guest_id,other_id,type,strength\na,b,friend,high\n")
    guests = csv_loader.load_guests(tmp_path / "guests.csv")
    with pytest.raises(ValueError, match="bad strength for a -> b: high"):
        csv_loader.load_relationships(tmp_path / "rels.csv", guests, {"a", "b"})


def test_missing_columns(tmp_path):
    (tmp_path / "tables.csv").write_text("id,seats\nt1,4\n")
    with pytest.raises(ValueError, match="capacity"):
        csv_loader.load_tables(tmp_path / "tables.csv")


def test_bad_constraint_type(tmp_path):
    (tmp_path / "constraints.csv").write_text("id,type,guest_ids\nk1,beside,a|b\n")
    with pytest.raises(ValueError):
        csv_loader.load_constraints(tmp_path / "constraints.csv")


def test_cli_writes_outputs(data_dir, capsys):
    out_assignments = data_dir / "out" / "assignments.csv"
    out_report = data_dir / "out" / "report.csv"
    code = cli.main([
        "--guests", str(data_dir / "guests.csv"),
        "--tables", str(data_dir / "tables.csv"),
        "--relationships", str(data_dir / "relationships.csv"),
        "--constraints", str(data_dir / "constraints.csv"),
        "--out-assignments", str(out_assignments),
        "--out-report", str(out_report),
    ])
    assert code == 0

    printed = capsys.readouterr().out
    assert "a,t1" in printed
    assert "[SCORE] 93/100" in printed
    assert "[WARN] Constraint violated" in printed

    with out_assignments.open() as f:
        rows = list(csv.reader(f))
    assert rows == [["guest", "table"], ["a", "t1"], ["b", "t1"], ["c", "t1"]]

    with out_report.open() as f:
        report = list(csv.DictReader(f))
    assert [r["table"] for r in report] == ["t1", "t2"]
    assert report[0]["members"] == "a|b|c"
    assert report[0]["occupancy"] == "3"
    assert report[1]["occupancy"] == "0"


def test_cli_include_declined(data_dir, capsys):
    code = cli.main([
        "--guests", str(data_dir / "guests.csv"),
        "--tables", str(data_dir / "tables.csv"),
        "--include-declined",
    ])
    assert code == 0
    assert "d,t2" in capsys.readouterr().out


def test_cli_missing_file(tmp_path, capsys):
    code = cli.main(["--guests", str(tmp_path / "nope.csv"), "--tables", str(tmp_path / "nope.csv")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_lists_unseated_guests(data_dir, capsys):
    (data_dir / "small.csv").write_text("id,capacity\nt1,2\n")
    code = cli.main([
        "--guests", str(data_dir / "guests.csv"),
        "--tables", str(data_dir / "small.csv"),
    ])
    assert code == 0
    printed = capsys.readouterr().out
    assert "[WARN] 1 guest(s) could not be assigned" in printed
    assert "[UNSEATED] c Cy Jones" in printed
