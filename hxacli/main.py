from __future__ import annotations
import argparse
import logging
import os

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from libhxa import HxaError, MetaKind, read_hxa
from libhxa.obj import write_obj
from libhxa.summary import summarize_hxa

console = Console()
err_console = Console(stderr=True)

PREVIEW_ITEMS = 8


def setup_logging(level: int = logging.WARNING) -> None:
    logger = logging.getLogger("libhxa")
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()
    handler = RichHandler(console=err_console, show_path=False)
    handler.setLevel(level)
    logger.addHandler(handler)


def _preview(values: np.ndarray) -> str:
    items = ", ".join(str(v) for v in values[:PREVIEW_ITEMS].tolist())
    if values.size > PREVIEW_ITEMS:
        items += f", ... ({values.size} total)"
    return escape(f"[{items}]")


def cmd_summary(args: argparse.Namespace) -> int:
    s = summarize_hxa(args.hxa)
    console.print(f"[bold]File:[/bold] {s.path}")
    console.print(f"[bold]Size:[/bold] {s.file_size} bytes")
    console.print(f"[bold]Version:[/bold] {s.version}")
    console.print(f"[bold]Nodes:[/bold] {len(s.nodes)}")

    for n in s.nodes:
        title = f"Node {n.index}: {n.kind} ({n.metadata_count} metadata)"
        if n.image_kind is not None:
            title += f" {n.image_kind} {n.resolution[0]}x{n.resolution[1]}x{n.resolution[2]}"
        t = Table(title=title)
        t.add_column("Stack")
        t.add_column("Layer", overflow="fold")
        t.add_column("Type")
        t.add_column("Comp", justify="right")
        t.add_column("Elements", justify="right")
        if not n.stacks:
            t.add_row("(no body)", "-", "-", "-", "-")
        for st in n.stacks:
            if not st.layers:
                t.add_row(st.name, "(empty)", "-", "-", str(st.length))
            for layer in st.layers:
                t.add_row(st.name, escape(layer.name), layer.element_type, str(layer.components), str(layer.elements))
        console.print(t)
    return 0


def _add_meta(tree: Tree, entries) -> None:
    for m in entries:
        if m.kind is MetaKind.META:
            _add_meta(tree.add(f"[cyan]{escape(m.name)}[/cyan] META ({len(m.value)})"), m.value)
        elif m.kind is MetaKind.TEXT:
            tree.add(f"[cyan]{escape(m.name)}[/cyan] TEXT {escape(repr(m.value))}")
        elif m.kind is MetaKind.BINARY:
            tree.add(f"[cyan]{escape(m.name)}[/cyan] BINARY <{len(m.value)} bytes>")
        else:
            tree.add(f"[cyan]{escape(m.name)}[/cyan] {m.kind.name} {_preview(m.value)}")


def _add_stack(tree: Tree, name: str, stack) -> None:
    branch = tree.add(f"{name} stack, {stack.length} elements, {len(stack)} layers")
    for layer in stack:
        branch.add(
            f"[green]{escape(layer.name)}[/green] {layer.element_type.name} x{layer.component_count} "
            f"{_preview(layer.data)}"
        )


def cmd_dump(args: argparse.Namespace) -> int:
    hxa = read_hxa(args.hxa)
    root = Tree(f"[bold]{os.path.basename(args.hxa)}[/bold] (version {hxa.version})")
    for i, node in enumerate(hxa.nodes):
        branch = root.add(f"[bold]node {i}[/bold] {node.kind.name}")
        if node.metadata:
            _add_meta(branch.add(f"metadata ({len(node.metadata)})"), node.metadata)
        if node.geometry is not None:
            g = node.geometry
            _add_stack(branch, "vertex", g.vertex_stack)
            _add_stack(branch, "corner", g.corner_stack)
            _add_stack(branch, "edge", g.edge_stack)
            _add_stack(branch, "face", g.face_stack)
        elif node.image is not None:
            img = node.image
            branch.add(f"{img.image_kind.name} resolution {tuple(img.resolution)}")
            _add_stack(branch, "image", img.image_stack)
    console.print(root)
    return 0


def cmd_to_obj(args: argparse.Namespace) -> int:
    out = args.out or os.path.splitext(args.hxa)[0] + ".obj"
    if not out.lower().endswith(".obj"):
        raise SystemExit("--out must end with .obj")

    hxa = read_hxa(args.hxa)
    count = write_obj(hxa, out, scale=args.scale)
    if count == 0:
        console.print("[yellow]No geometry nodes found; wrote an empty OBJ.[/yellow]")
    console.print(f"[green]Wrote:[/green] {out} ({count} objects)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hxacli")
    p.add_argument("-v", "--verbose", action="store_true", help="Log decoder details")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("summary", help="Print node and layer tables for an HxA file")
    s.add_argument("hxa")
    s.set_defaults(fn=cmd_summary)

    d = sub.add_parser("dump", help="Print the full node / layer / metadata tree")
    d.add_argument("hxa")
    d.set_defaults(fn=cmd_dump)

    o = sub.add_parser("to-obj", help="Convert the geometry nodes of an HxA file to Wavefront OBJ")
    o.add_argument("hxa")
    o.add_argument("--out", default=None)
    o.add_argument("--scale", type=float, default=1.0)
    o.set_defaults(fn=cmd_to_obj)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return int(args.fn(args))
    except HxaError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
