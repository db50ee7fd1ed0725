__all__ = ["app"]

from pathlib import Path
from typing import Annotated, Optional

import typer
from returns.result import Failure, Success

from .algorithm import Algorithm
from .expression import ParsedExpression, parse_expression
from .function import Einsum
from .planner import contraction_cost

app = typer.Typer()


def describe(expression: ParsedExpression, extent: int, algorithm: Algorithm) -> str:
    function = Einsum(expression, algorithm)

    # Rank-0 factors would otherwise be invisible
    factors = [expression.factor_deparse(i) or "()" for i in range(expression.number_of_factors)]

    lines = [
        f"expression: {expression}",
        f"factors: {', '.join(factors)}",
        f"contractions: {'; '.join(str(contraction) for contraction in expression.contractions)}",
        f"free labels: {', '.join(expression.free_labels)}",
        f"output labels: {', '.join(expression.output_labels)}",
        f"algorithm: {'network' if function.uses_network else 'direct'}",
    ]

    if not function.uses_network:
        return "\n".join(lines)

    total = 0
    for i, plan in enumerate(function.plan(extent)):
        node_ids = ", ".join(str(node.id) for node in plan.component.nodes)
        lines.append(f"component {i}: nodes {node_ids}; rank {plan.rank}")
        if plan.is_trace:
            lines.append(f"  trace: {expression.factor_deparse(plan.factor)}")
        for step in plan.steps:
            lines.append(f"  {step} cost {step.cost(extent)}")
        total += contraction_cost(plan.steps, extent)

    lines.append(f"total cost: {total}")

    return "\n".join(lines)


@app.command()
def einsora(
    expression: Annotated[
        str,
        typer.Argument(
            show_default=False,
            help="The einsum expression to plan, e.g. ij,jk,kl->il.",
        ),
    ],
    extent: Annotated[
        int,
        typer.Option(
            "--extent",
            "-d",
            min=1,
            help="The size of every dimension, which determines the cost of each contraction.",
        ),
    ] = 2,
    algorithm: Annotated[
        Algorithm,
        typer.Option(
            "--algorithm",
            "-a",
            help="The evaluation algorithm to report.",
        ),
    ] = Algorithm.auto,
    max_length: Annotated[
        Optional[int],
        typer.Option(
            "--max-length",
            help="Reject expressions longer than this many characters.",
        ),
    ] = None,
    output_path: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            writable=True,
            help=(
                "The file to which the plan will be written. If not specified, prints to "
                "standard out."
            ),
        ),
    ] = None,
):
    match parse_expression(expression, max_length=max_length):
        case Failure(error):
            typer.echo(f"Failed to parse expression:\n{error}", err=True)
            raise typer.Exit(1)
        case Success(parsed_expression):
            pass
        case _:
            raise NotImplementedError()

    text = describe(parsed_expression, extent, algorithm)

    if output_path is None:
        typer.echo(text)
    else:
        output_path.write_text(text)
