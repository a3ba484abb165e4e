"""Integration tests for end-to-end workflows."""

from splitbill.cli.main import cli


def _bill_id(output):
    for line in output.split("\n"):
        if "ID:" in line:
            return line.split("ID:")[1].strip().rstrip(")")
    return None


def test_full_workflow(cli_runner, temp_db):
    """Test complete workflow: itemize → pay → settle → stats → contacts."""
    db_args = ["--db-path", temp_db.database_path]

    # Step 1: Itemized lunch
    result = cli_runner.invoke(
        cli,
        db_args
        + [
            "bill",
            "itemize",
            "Team Lunch",
            "--participant",
            "Alice",
            "--participant",
            "Bob",
            "--participant",
            "Carol",
            "--item",
            "Nachos:10.00:Alice,Bob,Carol",
            "--item",
            "Burger:12.50:Bob",
            "--date",
            "2025-08-07",
        ],
    )
    assert result.exit_code == 0
    lunch_id = _bill_id(result.output)
    assert lunch_id is not None
    assert "Total: $22.50" in result.output

    # Step 2: Manual taxi
    result = cli_runner.invoke(
        cli,
        db_args
        + [
            "bill",
            "create",
            "Uber to Airport",
            "--total",
            "45.00",
            "--equal",
            "--participant",
            "Alice",
            "--participant",
            "Bob",
            "--participant",
            "Carol",
            "--date",
            "2025-08-04",
        ],
    )
    assert result.exit_code == 0
    taxi_id = _bill_id(result.output)

    # Step 3: Itemized amounts add up to the total
    temp_db.disconnect()
    lunch = temp_db.get_bill(lunch_id)
    assert sum(p.amount_owed for p in lunch.participants) == lunch.total_amount
    temp_db.disconnect()

    # Step 4: Pay for the lunch one by one
    for name in ("Alice", "Bob"):
        result = cli_runner.invoke(cli, db_args + ["bill", "pay", lunch_id, name])
        assert result.exit_code == 0
    result = cli_runner.invoke(cli, db_args + ["bill", "pay", lunch_id, "Carol"])
    assert "Bill 'Team Lunch' is settled" in result.output

    # Step 5: Settle the taxi directly
    result = cli_runner.invoke(cli, db_args + ["bill", "settle", taxi_id])
    assert result.exit_code == 0

    # Step 6: Statistics
    result = cli_runner.invoke(cli, db_args + ["bill", "stats"])
    assert "Bills: 2 (2 settled, 0 pending)" in result.output
    assert "USD: total $67.50, settled $67.50, pending $0.00" in result.output

    # Step 7: Participants were remembered once each
    result = cli_runner.invoke(cli, db_args + ["contact", "list"])
    assert result.exit_code == 0
    for name in ("Alice", "Bob", "Carol"):
        assert result.output.count(name) == 1

    # Step 8: List shows newest first
    result = cli_runner.invoke(cli, db_args + ["bill", "list"])
    assert result.output.index("Team Lunch") < result.output.index("Uber to Airport")
