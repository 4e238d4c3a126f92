"""Tests for the filter/project pipeline.

Test categories:
- TestGroupMembership: groups omitted from the view are dropped
- TestDirectedType: edge directionality constraints
- TestFiltering: pre-aggregation and post-transform filters
- TestVisibility: authorisation checks
- TestProjection: allow-list and deny-list
- TestLaziness: order, one-at-a-time evaluation, idempotence
- TestErrors: halt/skip policies, upstream failures, resource release
"""

from __future__ import annotations

import itertools

import pytest

from graph_query import (
    ConfigurationError,
    DirectedType,
    Edge,
    ElementFilter,
    ElementPipeline,
    Entity,
    EvaluationError,
    IdentifierType,
    IsEqual,
    IsMoreThan,
    OnError,
    View,
    ViewElementDefinition,
    filter_elements,
)

from conftest import EDGE, EDGE_2, ENTITY, ENTITY_2

ALL_AUTHS = {"basic", "private"}


class Boom:
    def test(self, value):
        raise RuntimeError("predicate failed")


class ClosingSource:
    """Upstream source recording whether it was closed."""

    def __init__(self, items, fail_after=None):
        self._items = list(items)
        self._fail_after = fail_after
        self.closed = False
        self.pulled = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self._fail_after is not None and self.pulled >= self._fail_after:
            raise OSError("store connection lost")
        if self.pulled >= len(self._items):
            raise StopIteration
        item = self._items[self.pulled]
        self.pulled += 1
        return item

    def close(self):
        self.closed = True


class TestGroupMembership:
    def test_omitted_group_dropped(self, elements):
        view = View.Builder().entity(ENTITY).build()
        results = list(filter_elements(elements, view, data_auths=ALL_AUTHS))
        assert results
        assert all(e.group == ENTITY for e in results)
        assert len(results) == 3

    def test_empty_view_returns_nothing(self, elements):
        assert list(filter_elements(elements, View())) == []

    def test_everything_returns_all(self, elements):
        assert list(filter_elements(elements, View.everything(), data_auths=ALL_AUTHS)) == elements

    def test_entity_group_does_not_admit_edge_group_of_same_name(self):
        view = View.Builder().entity("Same").build()
        results = list(filter_elements([Edge("Same", "a", "b"), Entity("Same", "v")], view))
        assert results == [Entity("Same", "v")]


class TestDirectedType:
    @pytest.mark.parametrize("directed_type", list(DirectedType))
    def test_edges_filtered_by_directed_type(self, edges, directed_type):
        view = View.Builder().edges([EDGE, EDGE_2]).build()
        results = list(filter_elements(edges, view, directed_type=directed_type, data_auths=ALL_AUTHS))
        expected = [e for e in edges if directed_type.accepts(e.directed)]
        assert results == expected

    def test_directed_excludes_every_undirected_edge(self, edges):
        view = View.Builder().edges([EDGE, EDGE_2]).build()
        results = list(filter_elements(edges, view, directed_type=DirectedType.DIRECTED))
        assert all(e.directed for e in results)
        assert len(results) == 3

    def test_either_excludes_nothing(self, edges):
        view = View.Builder().edges([EDGE, EDGE_2]).build()
        assert list(filter_elements(edges, view, DirectedType.EITHER, ALL_AUTHS)) == edges

    def test_entities_unaffected(self, entities):
        view = View.Builder().entities([ENTITY, ENTITY_2]).build()
        results = list(filter_elements(entities, view, DirectedType.UNDIRECTED, ALL_AUTHS))
        assert results == entities


class TestFiltering:
    def test_pre_aggregation_filter_on_vertex(self, elements):
        view = View.Builder().entity(
            ENTITY,
            ViewElementDefinition(
                pre_aggregation_filter=ElementFilter.Builder()
                .select(IdentifierType.VERTEX.name)
                .execute(IsEqual("A1"))
                .build()
            ),
        ).build()
        results = list(filter_elements(elements, view, data_auths={"basic"}))
        assert len(results) == 1
        assert results[0].vertex == "A1"

    def test_pre_aggregation_sees_properties_before_projection(self):
        view = View.Builder().entity(
            "E",
            ViewElementDefinition(
                properties={"count"},
                pre_aggregation_filter=ElementFilter.Builder().select("weight").execute(IsMoreThan(1)).build(),
            ),
        ).build()
        source = [Entity("E", 1, {"count": 1, "weight": 2}), Entity("E", 2, {"count": 1, "weight": 0})]
        assert list(filter_elements(source, view)) == [Entity("E", 1, {"count": 1})]

    def test_post_transform_filter_sees_projected_element(self):
        view = View.Builder().entity(
            "E",
            ViewElementDefinition(
                exclude_properties={"count"},
                post_transform_filter=ElementFilter.Builder().select("count").execute(IsEqual(None)).build(),
            ),
        ).build()
        source = [Entity("E", 1, {"count": 1, "weight": 2})]
        assert list(filter_elements(source, view)) == [Entity("E", 1, {"weight": 2})]


class TestVisibility:
    def test_basic_element_included_with_basic_auth(self):
        view = View.everything()
        element = Entity("E", 1, {"visibility": "basic"})
        assert list(filter_elements([element], view, data_auths={"basic"})) == [element]

    def test_basic_element_excluded_without_auth(self):
        view = View.everything()
        element = Entity("E", 1, {"visibility": "basic"})
        assert list(filter_elements([element], view, data_auths=set())) == []
        assert list(filter_elements([element], view, data_auths={"private"})) == []

    def test_unlabelled_elements_always_visible(self, elements):
        results = list(filter_elements(elements, View.everything()))
        assert all("visibility" not in e.properties for e in results)
        assert len(results) == len(elements) - 3

    def test_string_auths_rejected(self, elements):
        with pytest.raises(ConfigurationError):
            filter_elements(elements, View.everything(), data_auths="basic")


class TestProjection:
    def test_allow_list(self):
        view = View.Builder().entity("E", ViewElementDefinition(properties={"count"})).build()
        source = [Entity("E", 1, {"count": 1, "weight": 2})]
        assert [e.properties for e in filter_elements(source, view)] == [{"count": 1}]

    def test_deny_list(self):
        view = View.Builder().entity("E", ViewElementDefinition(exclude_properties={"weight"})).build()
        source = [Entity("E", 1, {"count": 1, "weight": 2})]
        assert [e.properties for e in filter_elements(source, view)] == [{"count": 1}]

    def test_source_elements_not_mutated(self):
        view = View.Builder().entity("E", ViewElementDefinition(properties={"count"})).build()
        source = [Entity("E", 1, {"count": 1, "weight": 2})]
        list(filter_elements(source, view))
        assert source[0].properties == {"count": 1, "weight": 2}

    def test_edges_projected_per_group(self, edges):
        view = View.Builder().edge(EDGE, ViewElementDefinition(properties={"count"})).build()
        results = list(filter_elements(edges, view, data_auths={"basic"}))
        assert len(results) == 3
        for element in results:
            assert element.properties == {"count": 1}


class TestLaziness:
    def test_order_preserved(self):
        source = [Entity("E", i) for i in range(10)]
        assert list(filter_elements(source, View.everything())) == source

    def test_unbounded_source(self):
        source = (Entity("E", i, {"n": i}) for i in itertools.count())
        view = View.Builder().entity(
            "E",
            ViewElementDefinition(
                pre_aggregation_filter=ElementFilter.Builder().select("n").execute(IsMoreThan(100)).build()
            ),
        ).build()
        results = filter_elements(source, view)
        assert [e.vertex for e in itertools.islice(results, 3)] == [101, 102, 103]

    def test_pulls_one_at_a_time(self):
        source = ClosingSource([Entity("E", i) for i in range(5)])
        results = filter_elements(source, View.everything())
        next(results)
        assert source.pulled == 1
        next(results)
        assert source.pulled == 2

    def test_idempotent(self, elements):
        view = (
            View.Builder()
            .entity(ENTITY, ViewElementDefinition(exclude_properties={"count"}))
            .edge(EDGE, ViewElementDefinition(properties={"count", "visibility"}))
            .build()
        )
        once = list(filter_elements(elements, view, DirectedType.DIRECTED, {"basic"}))
        twice = list(filter_elements(once, view, DirectedType.DIRECTED, {"basic"}))
        assert once == twice

    def test_pipeline_object_reusable(self, elements):
        pipeline = ElementPipeline(View.Builder().entity(ENTITY).build(), data_auths={"basic"})
        assert list(pipeline(elements)) == list(pipeline(elements))


class TestErrors:
    def _failing_view(self):
        return View.Builder().entity(
            "E",
            ViewElementDefinition(
                pre_aggregation_filter=ElementFilter.Builder().select("n").execute(Boom()).build()
            ),
        ).build()

    def test_halts_by_default(self):
        results = filter_elements([Entity("E", 1)], self._failing_view())
        with pytest.raises(EvaluationError) as exc_info:
            list(results)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_skip_on_error(self):
        view = self._failing_view()
        source = [Entity("E", 1), Entity("Other", 2)]
        view = View(entities={"E": view.get_entity("E"), "Other": None})
        assert list(filter_elements(source, view, on_error=OnError.SKIP)) == [Entity("Other", 2)]

    def test_bad_visibility_label_halts(self):
        with pytest.raises(EvaluationError):
            list(filter_elements([Entity("E", 1, {"visibility": 3})], View.everything()))

    def test_bad_visibility_label_skipped(self):
        source = [Entity("E", 1, {"visibility": 3}), Entity("E", 2)]
        results = list(filter_elements(source, View.everything(), on_error=OnError.SKIP))
        assert results == [Entity("E", 2)]

    def test_upstream_failure_surfaces_as_evaluation_error(self):
        source = ClosingSource([Entity("E", 1), Entity("E", 2)], fail_after=1)
        results = filter_elements(source, View.everything())
        assert next(results) == Entity("E", 1)
        with pytest.raises(EvaluationError) as exc_info:
            next(results)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert source.closed

    def test_upstream_closed_when_exhausted(self):
        source = ClosingSource([Entity("E", 1)])
        list(filter_elements(source, View.everything()))
        assert source.closed

    def test_upstream_closed_on_early_termination(self):
        source = ClosingSource([Entity("E", i) for i in range(5)])
        results = filter_elements(source, View.everything())
        next(results)
        results.close()
        assert source.closed

    def test_upstream_closed_on_halt(self):
        source = ClosingSource([Entity("E", 1)])
        with pytest.raises(EvaluationError):
            list(filter_elements(source, self._failing_view()))
        assert source.closed

    def test_invalid_arguments_raise_immediately(self):
        with pytest.raises(ConfigurationError):
            filter_elements([], {"E": None})  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError):
            filter_elements([], View(), directed_type="directed")  # type: ignore[arg-type]
        with pytest.raises(ConfigurationError):
            ElementPipeline(View(), on_error="skip")  # type: ignore[arg-type]
