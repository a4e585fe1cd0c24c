"""
HTML Editor - Applies parsed intents to an HTML document.

Uses BeautifulSoup with the stdlib html.parser backend, so edits work on
the loose, LLM-produced markup without an external parser.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional

from bs4 import BeautifulSoup, Tag

from channelsite.core.logging_config import get_logger
from channelsite.editing.intent_parser import ComponentIntent

logger = get_logger(__name__)

# Allowed difference in element count between original and edited page
MAX_ELEMENT_DELTA = 5

_FENCE_RE = re.compile(r"```[a-zA-Z]*\s*\n?([\s\S]*?)```")
_DOC_START_RE = re.compile(r"<!doctype\s+html|<html[\s>]", re.IGNORECASE)
_DOC_END_RE = re.compile(r"</html\s*>", re.IGNORECASE)


@dataclass
class EditResult:
    success: bool
    modified_code: Optional[str] = None
    error: Optional[str] = None
    changes_summary: Optional[str] = None


def _parse_style(style: str) -> Dict[str, str]:
    declarations = {}
    for part in style.split(";"):
        if ":" in part:
            prop, value = part.split(":", 1)
            declarations[prop.strip()] = value.strip()
    return declarations


def _format_style(declarations: Dict[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in declarations.items())


def extract_html_document(llm_output: str) -> str:
    """
    Pull the HTML document out of a model reply.

    Handles markdown code fences and prose before <!DOCTYPE html> / <html>
    or after </html>. Output with no recognizable document is returned
    stripped, minus any fences.
    """
    text = (llm_output or "").strip()

    fenced = _FENCE_RE.search(text)
    if fenced and _DOC_START_RE.search(fenced.group(1)):
        text = fenced.group(1).strip()

    start = _DOC_START_RE.search(text)
    if start:
        text = text[start.start():]
        ends = list(_DOC_END_RE.finditer(text))
        if ends:
            text = text[:ends[-1].end()]
        return text.strip()

    return _FENCE_RE.sub(lambda m: m.group(1), text).strip()


class HTMLEditor:
    """
    DOM-level edits on generated pages.

    Example:
        >>> editor = HTMLEditor()
        >>> result = editor.apply_component_edit(intent, html)
        >>> page = editor.replace_component(html, result.modified_code, intent.target_component_id)
    """

    def _soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", "html.parser")

    def _locate(
        self,
        soup: BeautifulSoup,
        component_id: str,
        selector: Optional[str] = None
    ) -> Optional[Tag]:
        """Find an element by id, then class, then the map selector."""
        target = soup.find(id=component_id)
        if target is None:
            target = soup.find(class_=component_id)
        if target is None and selector:
            target = soup.select_one(selector)
        return target

    def apply_component_edit(self, intent: ComponentIntent, html: str) -> EditResult:
        """
        Apply an intent's updates to the target element.

        Returns the modified element's markup; use replace_component to
        put it back into the page.
        """
        soup = self._soup(html)
        target = self._locate(soup, intent.target_component_id, intent.selector)

        if target is None:
            return EditResult(
                success=False,
                error=f'Component with ID "{intent.target_component_id}" not found',
            )

        updates = intent.updates
        changes = []

        if updates.style:
            declarations = _parse_style(target.get("style", ""))
            for prop, value in updates.style.items():
                declarations[prop] = value
                changes.append(f"{prop}: {value}")
            target["style"] = _format_style(declarations)

        classes = list(target.get("class", []))
        if updates.add_class and updates.add_class not in classes:
            classes.append(updates.add_class)
            changes.append(f"Added class: {updates.add_class}")
        if updates.remove_class and updates.remove_class in classes:
            classes.remove(updates.remove_class)
            changes.append(f"Removed class: {updates.remove_class}")
        if classes:
            target["class"] = classes
        elif target.has_attr("class"):
            del target["class"]

        if updates.content:
            if target.name in ("input", "textarea"):
                target["value"] = updates.content
            else:
                target.string = updates.content
            changes.append(f"Content updated to: {updates.content}")

        for attr, value in updates.attributes.items():
            target[attr] = value
            changes.append(f"{attr}: {value}")

        logger.debug(f"Applied edit to {intent.target_component_id}: {changes}")

        return EditResult(
            success=True,
            modified_code=str(target),
            changes_summary=", ".join(changes),
        )

    def replace_component(
        self,
        original_html: str,
        modified_component_html: str,
        component_id: str
    ) -> str:
        """Swap the element found by id/class for new markup; unchanged if absent."""
        soup = self._soup(original_html)
        target = self._locate(soup, component_id)

        if target is None:
            logger.warning(f"replace_component: '{component_id}' not found, page unchanged")
            return str(soup)

        replacement = self._soup(modified_component_html).find(True)
        if replacement is not None:
            target.replace_with(replacement)

        return str(soup)

    def extract_component(self, html: str, component_id: str) -> Optional[str]:
        target = self._locate(self._soup(html), component_id)
        return str(target) if target is not None else None

    def validate_edit(self, original_code: str, modified_code: str) -> bool:
        """
        Sanity check an edited page against the original.

        Both must contain markup, and their element counts may differ by
        at most MAX_ELEMENT_DELTA.
        """
        original_count = len(self._soup(original_code).find_all(True))
        modified_count = len(self._soup(modified_code).find_all(True))

        if original_count == 0 or modified_count == 0:
            return False

        delta = abs(original_count - modified_count)
        if delta > MAX_ELEMENT_DELTA:
            logger.warning(
                f"Edit rejected: element count {original_count} -> {modified_count}"
            )
            return False

        return True
