"""Range-keyed text substitution."""

from typing import List

from cwise.cwise_exceptions import CwiseEditError
from cwise.cwise_types import TextEdit


class EditBuffer:
    """
    Collects replacements keyed by offsets into an unchanging source text.

    Offsets always refer to the original text, so edits can be recorded in any
    order without tracking how earlier replacements shift later positions.
    """

    def __init__(self, text: str):
        """
        Initialize the buffer.

        Args:
            text: Source text all edit offsets refer to
        """
        self._text = text
        self._edits: List[TextEdit] = []

    @property
    def text(self) -> str:
        return self._text

    def edits(self) -> List[TextEdit]:
        """Return recorded edits in range order."""
        return sorted(self._edits, key=lambda e: (e.start, e.end))

    def replace(self, start: int, end: int, replacement: str) -> None:
        """
        Record that the text in [start, end) becomes `replacement`.

        Raises:
            CwiseEditError: If the range does not lie within the text
        """
        if not 0 <= start <= end <= len(self._text):
            raise CwiseEditError(
                f'Edit range [{start}, {end}) lies outside the source text',
                {'range': [start, end], 'text_length': len(self._text)}
            )

        self._edits.append(TextEdit(start, end, replacement))

    def apply(self, start: int, end: int) -> str:
        """
        Return the text in [start, end) with every recorded edit applied.

        Args:
            start: Start offset of the window to reconstruct
            end: End offset of the window to reconstruct

        Returns:
            Reconstructed text

        Raises:
            CwiseEditError: If edits overlap or straddle the window boundary
        """
        parts: List[str] = []
        position = start
        previous: TextEdit | None = None

        for edit in self.edits():
            if edit.end <= start or edit.start >= end:
                # Zero-width edits at the window edges still belong to it
                if not (edit.start == edit.end and start <= edit.start <= end):
                    continue

            if edit.start < start or edit.end > end:
                raise CwiseEditError(
                    'Edit straddles the reconstruction window',
                    {
                        'edit_range': [edit.start, edit.end],
                        'window': [start, end],
                    }
                )

            if previous is not None and edit.start < previous.end:
                raise CwiseEditError(
                    'Overlapping edits detected',
                    {
                        'edit1_range': [previous.start, previous.end],
                        'edit2_range': [edit.start, edit.end],
                    }
                )

            parts.append(self._text[position:edit.start])
            parts.append(edit.replacement)
            position = edit.end
            previous = edit

        parts.append(self._text[position:end])
        return ''.join(parts)
