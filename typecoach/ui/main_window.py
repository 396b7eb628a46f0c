"""Minimal practice window: pick a mode, type the passage, read the coaching."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from typecoach.core.coach import AIFeedback
from typecoach.core.modes import ModeRepository, TestMode
from typecoach.core.recorder import PracticeRecorder
from typecoach.core.session import SessionOutcome, SessionView
from typecoach.core.texts import TextRepository
from typecoach.ui.session_controller import SessionController

logger = logging.getLogger(__name__)


def format_feedback(feedback: AIFeedback) -> str:
    lines = [f"Score: {feedback.overall_score}/100", f"Next goal: {feedback.next_goal}"]
    for title, items in (
        ("Strengths", feedback.strengths),
        ("Weaknesses", feedback.weaknesses),
        ("Recommendations", feedback.recommendations),
    ):
        if items:
            lines.append(f"{title}:")
            lines.extend(f"  • {item}" for item in items)
    lines.append(f"Difficulty: {feedback.difficulty_adjustment.value}")
    return "\n".join(lines)


class MainWindow(QMainWindow):
    def __init__(
        self,
        modes: ModeRepository,
        texts: TextRepository,
        recorder: PracticeRecorder,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._modes = modes
        self._texts = texts
        self._recorder = recorder
        self._controller: Optional[SessionController] = None
        self._mode: Optional[TestMode] = None
        self._text = ""

        self.setWindowTitle("typecoach")
        self._build_ui()
        self._show_feedback(self._recorder.feedback())

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        top = QHBoxLayout()
        self._mode_combo = QComboBox(central)
        for mode in self._modes.all():
            self._mode_combo.addItem(mode.name, mode.id)
        self._start_button = QPushButton("Start Test", central)
        self._start_button.clicked.connect(self._start_test)
        top.addWidget(self._mode_combo, 1)
        top.addWidget(self._start_button)
        layout.addLayout(top)

        self._target_label = QLabel(central)
        self._target_label.setWordWrap(True)
        self._target_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        layout.addWidget(self._target_label)

        self._input = QPlainTextEdit(central)
        self._input.setEnabled(False)
        self._input.textChanged.connect(self._on_text_changed)
        layout.addWidget(self._input, 1)

        self._stats_label = QLabel(central)
        self._time_label = QLabel(central)
        stats_row = QHBoxLayout()
        stats_row.addWidget(self._stats_label, 1)
        stats_row.addWidget(self._time_label)
        layout.addLayout(stats_row)

        self._feedback_label = QLabel(central)
        self._feedback_label.setWordWrap(True)
        layout.addWidget(self._feedback_label)

        self.setCentralWidget(central)

    def _start_test(self) -> None:
        if self._controller is not None:
            self._controller.reset()
            self._controller.deleteLater()

        self._mode = self._modes.get(self._mode_combo.currentData())
        self._text = self._mode.build_text(self._texts)
        self._controller = SessionController(self._text, duration=self._mode.duration, parent=self)
        self._controller.statsChanged.connect(self._show_stats)
        self._controller.timeLeftChanged.connect(self._show_time_left)
        self._controller.completed.connect(self._on_completed)

        self._target_label.setText(self._text)
        self._input.blockSignals(True)
        self._input.clear()
        self._input.blockSignals(False)
        self._input.setEnabled(True)
        self._input.setFocus()
        self._show_stats(self._controller.view())
        self._show_time_left(self._controller.session.time_left)

    def _on_text_changed(self) -> None:
        if self._controller is not None:
            self._controller.on_input_change(self._input.toPlainText())

    def _show_stats(self, view: SessionView) -> None:
        s = view.stats
        self._stats_label.setText(
            f"{s.wpm} WPM · {s.cpm} CPM · {s.accuracy * 100:.0f}% · {s.errors} errors "
            f"· word {view.current_word_index + 1}/{len(view.word_list)}"
        )

    def _show_time_left(self, seconds: Optional[int]) -> None:
        self._time_label.setText(f"{seconds}s" if seconds is not None else "")

    def _on_completed(self, outcome: SessionOutcome) -> None:
        self._input.setEnabled(False)
        mode = self._mode
        recorded = self._recorder.record(
            outcome,
            text=self._text,
            duration_limit_seconds=mode.duration if mode else None,
            mode_tag=mode.tag if mode else "custom",
        )
        for achievement in recorded.newly_unlocked:
            logger.info("Unlocked: %s", achievement.title)
        self._show_feedback(recorded.feedback)

    def _show_feedback(self, feedback: Optional[AIFeedback]) -> None:
        if feedback is None:
            self._feedback_label.setText("Complete a few typing tests to get personalized feedback!")
            return
        self._feedback_label.setText(format_feedback(feedback))
