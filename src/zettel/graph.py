"""Link graph of the Zettelkasten.

:func:`build_link_graph` returns a :mod:`networkx` directed graph of the
notes and the links between them.  :func:`build_graph_spec` draws it as an
:mod:`altair` chart in which every node carries its link status:

- ``linked``: an existing note that some link points to;
- ``unlinked``: an existing note nothing links to;
- ``missing``: a dead-link target with no note behind it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import altair as alt
    import networkx as nx

    from zettel.kasten import Zettelkasten

STATUSES = ("linked", "unlinked", "missing")
STATUS_COLOURS = ("#4B90D9", "#F2A541", "#D64545")


def build_link_graph(kasten: "Zettelkasten", include_missing: bool = False) -> "nx.DiGraph":
    """Nodes are note ids (with ``title``, ``path`` and ``missing``); edges are links.

    Links to ids without a note are left out unless *include_missing* is
    set, in which case each dead target becomes a node with
    ``missing=True``.
    """
    import networkx as nx

    G: nx.DiGraph = nx.DiGraph()
    notes = kasten.notes()
    for note in notes:
        if note.id not in G:
            G.add_node(note.id, title=note.title, path=str(note.path), missing=False)
    for note in notes:
        for target in note.links:
            if target not in G:
                if not include_missing:
                    continue
                G.add_node(target, title=target, path=None, missing=True)
            G.add_edge(note.id, target)
    return G


def node_status(G: "nx.DiGraph", note_id: str) -> str:
    if G.nodes[note_id].get("missing"):
        return "missing"
    return "linked" if G.in_degree(note_id) else "unlinked"


def build_graph_spec(
    kasten: "Zettelkasten",
    *,
    highlight: str | None = None,
    width: int = 640,
    height: int = 480,
    seed: int = 42,
) -> "alt.LayerChart":
    """Return an Altair chart of the link graph, dead-link targets included.

    Nodes are coloured by status (see the module docstring) and sized by
    the number of incoming links; links to missing notes are dashed.
    *highlight* outlines one note id.  *seed* makes the spring layout
    reproducible.
    """
    import altair as alt
    import networkx as nx
    import polars as pl

    G = build_link_graph(kasten, include_missing=True)
    pos: dict[str, Any] = nx.spring_layout(G, seed=seed) if len(G) else {}

    nodes = pl.DataFrame(
        {
            "id": list(G.nodes),
            "title": [G.nodes[n]["title"] for n in G.nodes],
            "x": [float(pos[n][0]) for n in G.nodes],
            "y": [float(pos[n][1]) for n in G.nodes],
            "incoming": [int(G.in_degree(n)) for n in G.nodes],
            "status": [node_status(G, n) for n in G.nodes],
            "highlighted": [n == highlight for n in G.nodes],
        },
        schema={
            "id": pl.Utf8,
            "title": pl.Utf8,
            "x": pl.Float64,
            "y": pl.Float64,
            "incoming": pl.Int64,
            "status": pl.Utf8,
            "highlighted": pl.Boolean,
        },
    )

    coords = nodes.select("id", "x", "y")
    missing_ids = nodes.filter(pl.col("status") == "missing")["id"]
    edges = (
        pl.DataFrame(
            {"source": [s for s, _ in G.edges], "target": [t for _, t in G.edges]},
            schema={"source": pl.Utf8, "target": pl.Utf8},
        )
        .join(coords, left_on="source", right_on="id")
        .join(coords.rename({"id": "target", "x": "x2", "y": "y2"}), on="target")
        .with_columns(dead=pl.col("target").is_in(missing_ids))
    )

    x = alt.X("x:Q", axis=None)
    y = alt.Y("y:Q", axis=None)

    links = (
        alt.Chart(edges)
        .mark_rule(color="#999", opacity=0.6)
        .encode(
            x=x,
            y=y,
            x2="x2:Q",
            y2="y2:Q",
            strokeDash=alt.StrokeDash("dead:N", legend=None),
            tooltip=["source:N", "target:N"],
        )
    )
    points = (
        alt.Chart(nodes)
        .mark_point(filled=True, opacity=0.9, stroke="#222")
        .encode(
            x=x,
            y=y,
            color=alt.Color(
                "status:N",
                scale=alt.Scale(domain=list(STATUSES), range=list(STATUS_COLOURS)),
                legend=alt.Legend(title="status"),
            ),
            size=alt.Size("incoming:Q", scale=alt.Scale(range=[60, 360]), legend=None),
            strokeWidth=alt.condition("datum.highlighted", alt.value(3), alt.value(0)),
            tooltip=["id:N", "title:N", "status:N", "incoming:Q"],
        )
    )
    labels = alt.Chart(nodes).mark_text(dy=-12, fontSize=10).encode(x=x, y=y, text="title:N")

    return alt.layer(links, points, labels).properties(width=width, height=height)
