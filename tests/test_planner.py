import logging

import pytest

from einsora.expression import parse_expression
from einsora.network import ContractionInvariantError, Edge, IndexLocation, Node, TensorNetwork
from einsora.planner import PairwiseContraction, contraction_cost, plan_contraction, synthetic_label


def component_of(string):
    _, network = TensorNetwork.from_expression(parse_expression(string).unwrap())
    (component,) = network.connected_components()
    return component


def brute_force_cost(component, extent):
    if len(component) == 1:
        return 0

    costs = []
    for lhs, rhs, edges in component.group_edges_pairwise():
        contracted = component.copy()
        contracted.pairwise_contraction(lhs.id, rhs.id)
        head_cost = extent ** (lhs.rank + rhs.rank - len(edges))
        costs.append(head_cost + brute_force_cost(contracted, extent))
    return min(costs)


def test_single_node_has_empty_plan():
    assert plan_contraction(component_of("ii"), 3) == []
    assert plan_contraction(component_of("ij"), 3) == []


def test_matrix_multiply():
    (step,) = plan_contraction(component_of("ij,jk"), 3)

    assert step.lhs == Node(0, 2)
    assert step.rhs == Node(1, 2)
    assert step.edges == (Edge(IndexLocation(0, 1), IndexLocation(1, 0)),)
    assert step.output == Node(2, 2)
    assert step.cost(3) == 27
    assert step.index_labels() == ("ab", "bd")
    assert step.deparse() == "ab,bd"


def test_chain():
    plan = plan_contraction(component_of("ij,jk,kl"), 2)

    assert [(step.lhs.id, step.rhs.id, step.output.id) for step in plan] == [(0, 1, 3), (2, 3, 4)]
    assert [step.deparse() for step in plan] == ["ab,bd", "ab,ca"]
    assert contraction_cost(plan, 2) == 16


def test_cheaper_pair_is_contracted_first():
    plan = plan_contraction(component_of("ij,jk,k"), 4)

    assert (plan[0].lhs.id, plan[0].rhs.id) == (1, 2)
    assert contraction_cost(plan, 4) == 32


def test_cheaper_pair_is_first_pair():
    plan = plan_contraction(component_of("i,ij,jk"), 4)

    assert (plan[0].lhs.id, plan[0].rhs.id) == (0, 1)
    assert contraction_cost(plan, 4) == 32


def test_trace_is_reduced_with_its_node():
    (step,) = plan_contraction(component_of("ij,jkk"), 2)

    assert len(step.edges) == 2
    assert step.cost(2) == 8
    assert step.deparse() == "ab,bdd"
    assert step.output.rank == 1


@pytest.mark.parametrize(
    "string",
    [
        "ij,jk,kl,li",
        "abc,cde,efa,bdf",
        "ab,bcd,de,ec,f,fa",
        "i,ij,jk,kl,l",
        "ijk,jl,lmk,m",
        "aab,bc,cdde,e",
    ],
)
@pytest.mark.parametrize("extent", [1, 2, 3, 5])
def test_plan_cost_is_minimal(string, extent):
    component = component_of(string)
    plan = plan_contraction(component, extent)

    assert len(plan) == len(component) - 1
    assert contraction_cost(plan, extent) == brute_force_cost(component, extent)


def test_plan_ends_with_network_rank():
    component = component_of("ij,jk,kl,lm")

    plan = plan_contraction(component, 3)

    assert plan[-1].output.rank == component.rank() == 2


def test_plan_does_not_modify_component():
    component = component_of("ij,jk,kl,li")
    nodes = component.nodes
    edges = component.edges

    plan_contraction(component, 2)

    assert component.nodes == nodes
    assert component.edges == edges


def test_reduction_edge_must_end_at_operands():
    edge = Edge(IndexLocation(0, 0), IndexLocation(2, 0))

    with pytest.raises(ContractionInvariantError):
        PairwiseContraction(Node(0, 1), Node(1, 1), (edge,), Node(3, 0))


def test_synthetic_labels():
    assert synthetic_label(0) == "a"
    assert synthetic_label(25) == "z"
    assert synthetic_label(26) == "A"
    assert synthetic_label(52) == "Ā"


def test_plan_is_only_rendered_when_debug_logging(caplog, monkeypatch):
    def fail(self):
        raise AssertionError("rendered a step without debug logging")

    monkeypatch.setattr(PairwiseContraction, "__str__", fail)

    with caplog.at_level(logging.INFO, logger="einsora.planner"):
        plan = plan_contraction(component_of("ij,jk,kl"), 2)

    assert len(plan) == 2
    assert caplog.records == []


def test_plan_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="einsora.planner"):
        plan_contraction(component_of("ij,jk"), 3)

    assert any("0,1->2 (ab,bd)" in record.getMessage() for record in caplog.records)
