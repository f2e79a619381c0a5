"""Depth-first projection of a PSD layer tree into flat records.

Traversal uses an explicit stack so deeply nested documents do not hit the
interpreter recursion limit. Each stack entry carries the slash-delimited path
of its parent and the name of the nearest enclosing group.
"""

from dataclasses import dataclass, field

from app.psd.color_resolver import resolve_color, rgba_to_hex
from app.psd.models import (
    ColorEntry,
    GroupRecord,
    LayerKind,
    LayerNode,
    LayerSummary,
    PsdDocument,
    TextElement,
    TextPayload,
    TextStyle,
)


@dataclass
class WalkResult:
    text_elements: list[TextElement] = field(default_factory=list)
    layers: list[LayerSummary] = field(default_factory=list)
    groups: list[GroupRecord] = field(default_factory=list)
    colors: list[ColorEntry] = field(default_factory=list)
    text_by_group: dict[str, list[str]] = field(default_factory=dict)

    @property
    def all_text(self) -> str:
        return " ".join(e.text for e in self.text_elements).strip()


def opacity_percent(opacity: int) -> int:
    return int(opacity / 255 * 100 + 0.5)


def join_path(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


class LayerTreeWalker:
    """Walks a PsdDocument without mutating it."""

    def walk(self, document: PsdDocument) -> WalkResult:
        result = WalkResult()
        seen_colors: set[str] = set()
        stack: list[tuple[LayerNode, str, str | None]] = [
            (child, "", None) for child in reversed(document.root.children)
        ]

        while stack:
            node, parent_path, group = stack.pop()
            path = join_path(parent_path, node.name)

            if node.is_group:
                result.groups.append(self._group_record(node, path))
                stack.extend((child, path, node.name) for child in reversed(node.children))
                continue

            summary = self._summarize(node, path)
            result.layers.append(summary)

            if summary.color is not None and summary.color not in seen_colors:
                seen_colors.add(summary.color)
                result.colors.append(
                    ColorEntry(
                        hex=summary.color,
                        source=path,
                        opacity=summary.opacity,
                        blend_mode=node.blend_mode,
                    )
                )

            if node.text is not None:
                element = self._text_element(node, node.text, path, group)
                result.text_elements.append(element)
                if group is not None:
                    result.text_by_group.setdefault(group, []).append(element.text)

        return result

    def _group_record(self, node: LayerNode, path: str) -> GroupRecord:
        return GroupRecord(
            name=node.name,
            path=path,
            bounds=node.bounds,
            layers=[
                self._summarize(child, join_path(path, child.name))
                for child in node.children
                if not child.is_group
            ],
        )

    @staticmethod
    def _summarize(node: LayerNode, path: str) -> LayerSummary:
        kind = LayerKind.TEXT if node.text is not None else node.kind
        return LayerSummary(
            name=node.name,
            path=path,
            type=kind.value,
            visible=node.visible,
            opacity=opacity_percent(node.opacity),
            blend_mode=node.blend_mode,
            bounds=node.bounds,
            color=resolve_color(node),
            text=node.text.value if node.text is not None else None,
        )

    @staticmethod
    def _text_element(
        node: LayerNode, payload: TextPayload, path: str, group: str | None
    ) -> TextElement:
        style = TextStyle(
            font=payload.font,
            size=payload.size,
            color=rgba_to_hex(payload.color),
            alignment=payload.alignment,
            bold=payload.bold,
            italic=payload.italic,
            underline=payload.underline,
        )
        return TextElement(
            layer_name=node.name,
            path=path,
            text=payload.value,
            position=node.bounds,
            style=style,
            group=group,
            font_size=payload.size,
        )
