"""Tests for reconciliation logic."""

from gh_notion_sync.models import RowHandle
from gh_notion_sync.reconciler import build_identifier_map, plan_operations


class TestBuildIdentifierMap:
    """Tests for build_identifier_map."""

    def test_maps_issue_number_to_row(self) -> None:
        handles = [
            RowHandle(row_id="row-a", issue_number=1),
            RowHandle(row_id="row-b", issue_number=2),
        ]
        assert build_identifier_map(handles) == {1: "row-a", 2: "row-b"}

    def test_first_duplicate_wins(self) -> None:
        handles = [
            RowHandle(row_id="row-a", issue_number=1),
            RowHandle(row_id="row-dup", issue_number=1),
        ]
        assert build_identifier_map(handles) == {1: "row-a"}

    def test_empty(self) -> None:
        assert build_identifier_map([]) == {}


class TestPlanOperations:
    """Tests for plan_operations."""

    def test_empty_map_creates_everything(self, make_issue) -> None:
        issues = [make_issue(1), make_issue(2)]
        plan = plan_operations(issues, {})

        assert [i.number for i in plan.pages_to_create] == [1, 2]
        assert plan.pages_to_update == []

    def test_known_issues_are_updated(self, make_issue) -> None:
        issues = [make_issue(1), make_issue(2), make_issue(3)]
        plan = plan_operations(issues, {2: "row-2"})

        assert [i.number for i in plan.pages_to_create] == [1, 3]
        assert len(plan.pages_to_update) == 1
        assert plan.pages_to_update[0].row_id == "row-2"
        assert plan.pages_to_update[0].issue.number == 2

    def test_partition_is_total_and_disjoint(self, make_issue) -> None:
        issues = [make_issue(n) for n in range(1, 21)]
        identifier_map = {n: f"row-{n}" for n in range(1, 21) if n % 3 == 0}

        plan = plan_operations(issues, identifier_map)

        created = {i.number for i in plan.pages_to_create}
        updated = {u.issue.number for u in plan.pages_to_update}
        assert created.isdisjoint(updated)
        assert created | updated == set(range(1, 21))
        assert updated == set(identifier_map)
        assert plan.total == 20

    def test_rows_without_matching_issue_are_ignored(self, make_issue) -> None:
        plan = plan_operations([make_issue(1)], {1: "row-1", 99: "row-99"})

        assert plan.pages_to_create == []
        assert [u.row_id for u in plan.pages_to_update] == ["row-1"]

    def test_does_not_modify_map(self, make_issue) -> None:
        identifier_map = {1: "row-1"}
        plan_operations([make_issue(1), make_issue(2)], identifier_map)
        assert identifier_map == {1: "row-1"}
