"""
Progress header listing the workflow steps for the chosen paper type.
"""
from typing import Dict, Optional

from PySide6.QtWidgets import QHBoxLayout, QLabel, QWidget

from photosheet.workflow import STEP_SEQUENCES, Step, Variant


class StepHeader(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("stepHeader")
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(24, 8, 24, 8)
        self._labels: Dict[Step, QLabel] = {}
        self._variant: Optional[Variant] = None
        self._build(Variant.PASSPORT)

    def _build(self, variant: Variant) -> None:
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._labels.clear()
        steps = STEP_SEQUENCES[variant]
        for i, step in enumerate(steps):
            label = QLabel(f"{i + 1}. {step.label}")
            self._labels[step] = label
            self._layout.addWidget(label)
            if i < len(steps) - 1:
                self._layout.addWidget(QLabel("›"))
        self._layout.addStretch()
        self._variant = variant

    def set_position(self, step: Step, variant: Optional[Variant]) -> None:
        """Highlight the current step (PROCESSING highlights nothing)."""
        variant = variant or Variant.PASSPORT
        if variant is not self._variant:
            self._build(variant)
        for key, label in self._labels.items():
            label.setProperty("current", "true" if key is step else "false")
            # Re-polish so the dynamic property takes effect
            label.style().unpolish(label)
            label.style().polish(label)

    def current_text(self) -> Optional[str]:
        for label in self._labels.values():
            if label.property("current") == "true":
                return label.text()
        return None
