"""Minimal LaTeX element tree, written as a single line of source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO, Union

_SPECIAL = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def escape(text: str) -> str:
    """Escape characters that have a meaning in LaTeX text."""
    return "".join(_SPECIAL.get(c, c) for c in text)


@dataclass
class Directive:
    name: str
    opts: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)

    def write(self, out: TextIO) -> None:
        out.write(f"\\{self.name}")
        for opt in self.opts:
            out.write(f"[{opt}]")
        for arg in self.args:
            out.write(f"{{{arg}}}")
        out.write(" ")


@dataclass
class Environment:
    name: str
    elements: list[Element] = field(default_factory=list)

    def write(self, out: TextIO) -> None:
        out.write(f"\\begin{{{self.name}}} ")
        for element in self.elements:
            element.write(out)
        out.write(f"\\end{{{self.name}}} ")


@dataclass
class Raw:
    value: str

    def write(self, out: TextIO) -> None:
        out.write(f" {self.value} ")


Element = Union[Directive, Environment, Raw]


def section(title: str) -> Directive:
    return Directive("section", args=[title])


def subsection(title: str) -> Directive:
    return Directive("subsection", args=[title])
