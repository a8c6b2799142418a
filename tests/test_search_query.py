import copy
import logging

import pytest

from sprintboard.errors import InvalidArgumentError
from sprintboard.queries.search import (
    DEFAULT_ORDERING,
    SearchPredicate,
    SortKey,
    TextSearch,
    apply_filters,
    build_search_conditions,
    build_sort_options,
    calculate_pagination_meta,
    with_scope,
)
from sprintboard.queries.tickets import TicketQuery
from sprintboard.schemas.search import SortSpec
from sprintboard.services.filter_contract import Contains, Equals, In, NotEquals, Range

TICKET_FIELDS = TicketQuery.field_mapping


@pytest.mark.parametrize("term", [None, "", "   ", "\t\n"])
def test_blank_term_adds_no_text_constraint(term):
    assert build_search_conditions(term, ["title", "description"]) is None


def test_term_is_stripped_and_fields_keep_caller_order():
    text = build_search_conditions("  auth ", ["title", "description"])
    assert text == TextSearch(term="auth", fields=("title", "description"))


def test_term_without_searchable_fields_is_an_error():
    with pytest.raises(ValueError):
        build_search_conditions("auth", [])


def test_object_filters_are_lifted_to_nodes():
    predicate = apply_filters(
        SearchPredicate(),
        {"status": "TODO", "priority": ["HIGH", "CRITICAL"], "title": {"contains": "login"}},
    )
    assert predicate.filters == (
        Equals("status", "TODO"),
        In("priority", ("HIGH", "CRITICAL")),
        Contains("title", "login"),
    )


def test_rule_array_filters_map_every_operator():
    predicate = apply_filters(
        SearchPredicate(),
        [
            {"field": "status", "operator": "notEquals", "value": "CANCELLED"},
            {"field": "storyPoints", "operator": "between", "value": [1, 8]},
            {"field": "dueDate", "operator": "gte", "value": "2024-01-01"},
        ],
        TICKET_FIELDS,
    )
    assert predicate.filters == (
        NotEquals("status", "CANCELLED"),
        Range("story_points", gte=1, lte=8),
        Range("due_date", gte="2024-01-01"),
    )


def test_several_rules_on_one_column_all_apply():
    predicate = apply_filters(
        SearchPredicate(),
        [
            {"field": "story_points", "operator": "gte", "value": 2},
            {"field": "story_points", "operator": "lte", "value": 5},
        ],
    )
    assert predicate.filters == (Range("story_points", gte=2), Range("story_points", lte=5))


def test_later_filters_replace_earlier_ones_on_the_same_column():
    first = apply_filters(SearchPredicate(), {"status": "TODO", "priority": "LOW"})
    second = apply_filters(first, {"status": "ACTIVE"})
    assert second.filters == (Equals("priority", "LOW"), Equals("status", "ACTIVE"))


def test_unknown_rule_operator_is_rejected():
    with pytest.raises(InvalidArgumentError, match="Unsupported filter operator"):
        apply_filters(SearchPredicate(), [{"field": "status", "operator": "startsWith", "value": "T"}])


def test_filters_of_wrong_shape_are_rejected():
    with pytest.raises(InvalidArgumentError):
        apply_filters(SearchPredicate(), "status=TODO")


def test_empty_filters_return_the_base_predicate():
    base = SearchPredicate(scope={"project_id": 7})
    assert apply_filters(base, None) is base
    assert apply_filters(base, {}) is base
    assert apply_filters(base, []) is base


def test_apply_filters_does_not_mutate_inputs():
    base = SearchPredicate(scope={"project_id": 7}, filters=(Equals("status", "TODO"),))
    filters = [{"field": "priority", "operator": "in", "value": ["HIGH"]}]
    base_before = SearchPredicate(scope={"project_id": 7}, filters=(Equals("status", "TODO"),))
    filters_before = copy.deepcopy(filters)

    first = apply_filters(base, filters)
    second = apply_filters(base, filters)

    assert base == base_before
    assert filters == filters_before
    assert first == second


def test_scope_wins_over_colliding_filter(caplog):
    base = SearchPredicate(scope={"project_id": 7})
    with caplog.at_level(logging.WARNING, logger="sprintboard.queries.search"):
        predicate = apply_filters(base, {"projectId": 99, "status": "TODO"}, TICKET_FIELDS)

    assert predicate.filters == (Equals("status", "TODO"),)
    assert dict(predicate.scope) == {"project_id": 7}
    assert "search_filter_dropped_scope_collision field=project_id" in caplog.text


def test_with_scope_is_applied_last_and_drops_colliding_filters():
    predicate = apply_filters(SearchPredicate(), {"project_id": 99, "status": "TODO"})
    scoped = with_scope(predicate, {"project_id": 7})
    assert scoped.filters == (Equals("status", "TODO"),)
    assert dict(scoped.scope) == {"project_id": 7}


def test_external_and_internal_field_names_build_the_same_predicate():
    external = apply_filters(SearchPredicate(), {"storyPoints": 3, "assignedTo": None}, TICKET_FIELDS)
    internal = apply_filters(SearchPredicate(), {"story_points": 3, "assigned_to": None}, TICKET_FIELDS)
    assert external == internal


def test_default_ordering_when_no_sort_given():
    assert build_sort_options(None) == DEFAULT_ORDERING
    assert build_sort_options([]) == (SortKey("created_at", "desc"),)
    assert build_sort_options([]) == build_sort_options([])


def test_sort_applies_every_entry_in_order():
    ordering = build_sort_options(
        [{"field": "priority", "order": "DESC"}, {"field": "createdAt", "order": "asc"}],
        TICKET_FIELDS,
    )
    assert ordering == (SortKey("priority", "desc"), SortKey("created_at", "asc"))


def test_sort_accepts_a_single_spec_object():
    ordering = build_sort_options(SortSpec(field="dueDate", order="desc"), TICKET_FIELDS)
    assert ordering == (SortKey("due_date", "desc"),)


def test_sort_keeps_first_occurrence_of_a_column():
    ordering = build_sort_options(
        [{"field": "createdAt", "order": "ASC"}, {"field": "created_at", "order": "DESC"}],
        TICKET_FIELDS,
    )
    assert ordering == (SortKey("created_at", "asc"),)


def test_sort_rejects_unknown_direction():
    with pytest.raises(InvalidArgumentError, match="Invalid sort order"):
        build_sort_options([{"field": "title", "order": "sideways"}])


def test_sort_external_and_internal_names_match():
    external = build_sort_options([{"field": "storyPoints", "order": "DESC"}], TICKET_FIELDS)
    internal = build_sort_options([{"field": "story_points", "order": "DESC"}], TICKET_FIELDS)
    assert external == internal


@pytest.mark.parametrize(
    ("total", "skip", "take", "has_next", "has_prev"),
    [
        (30, 0, 25, True, False),
        (30, 25, 25, False, True),
        (25, 0, 25, False, False),
        (0, 0, 25, False, False),
        (10, 50, 25, False, True),
    ],
)
def test_pagination_meta(total, skip, take, has_next, has_prev):
    meta = calculate_pagination_meta(total, skip, take)
    assert meta.has_next is has_next
    assert meta.has_prev is has_prev
    assert (meta.total, meta.skip, meta.take) == (total, skip, take)
