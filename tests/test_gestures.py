"""
Test cases for gesture classification and recognition debouncing.
"""
import unittest
import sys
from pathlib import Path
from typing import List

# Add project root and tests to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from echoassist.config import load_config
from echoassist.gestures import (
    MAX_EVENTS,
    GestureClassifier,
    GestureProcessor,
    PredictionDisplay,
    RecognitionDebouncer,
    SentenceBuffer,
    SpeechGate,
)
from echoassist.library import GestureLibrary
from echoassist.pose import describe_pose
from echoassist.types import Prediction
from hand_fixtures import make_hand


def candidates(label: str, confidence: float = 0.9) -> List[Prediction]:
    """Ranked candidate list with a single entry."""
    return [Prediction(label=label, confidence=confidence)]


class TestGestureClassifier(unittest.TestCase):
    """Test ranking of library entries."""

    def setUp(self):
        """Set up a library with gestures at increasing distance from an open hand."""
        self.cfg = load_config()
        self.classifier = GestureClassifier(self.cfg)
        self.library = GestureLibrary()
        self.library.add_sample("open", describe_pose(make_hand()))
        self.library.add_sample("near", describe_pose(make_hand(jitter=0.01)))
        self.library.add_sample("mid", describe_pose(make_hand(jitter=0.02)))
        self.library.add_sample("far", describe_pose(make_hand(jitter=0.025)))
        self.library.add_sample("fist", describe_pose(make_hand(curled=(1, 1, 1, 1, 1))))
        self.live = describe_pose(make_hand())

    def test_at_most_three_candidates(self):
        """Test that the ranking is truncated to three candidates."""
        predictions = self.classifier.rank(self.live, self.library)
        self.assertEqual([p.label for p in predictions], ["OPEN", "NEAR", "MID"])

    def test_sorted_descending_above_floor(self):
        """Test that candidates are above the floor and sorted best first."""
        predictions = self.classifier.rank(self.live, self.library)
        self.assertEqual(predictions[0].confidence, 1.0)
        for p in predictions:
            self.assertGreater(p.confidence, 0.45)
        for a, b in zip(predictions, predictions[1:]):
            self.assertGreater(a.confidence, b.confidence)

    def test_floor_filters_weak_matches(self):
        """Test that entries scoring at or below 0.45 are dropped."""
        library = GestureLibrary()
        library.add_sample("fist", describe_pose(make_hand(curled=(1, 1, 1, 1, 1))))
        library.add_sample("wide", describe_pose(make_hand(jitter=0.04)))
        self.assertEqual(self.classifier.rank(self.live, library), [])

    def test_best_sample_wins(self):
        """Test that adding a poor sample never lowers an entry's confidence."""
        library = GestureLibrary()
        library.add_sample("open", describe_pose(make_hand(jitter=0.01)))
        before = self.classifier.rank(self.live, library)[0].confidence

        library.add_sample("open", describe_pose(make_hand(curled=(1, 1, 1, 1, 1))))
        after = self.classifier.rank(self.live, library)[0].confidence
        self.assertEqual(before, after)

        library.add_sample("open", describe_pose(make_hand()))
        self.assertEqual(self.classifier.rank(self.live, library)[0].confidence, 1.0)

    def test_cleared_library_yields_no_candidates(self):
        """Test that classification after a library clear is empty."""
        self.library.clear()
        self.assertEqual(self.classifier.rank(self.live, self.library), [])
        self.assertEqual(self.classifier.rank(describe_pose(make_hand(curled=(1, 0, 1, 0, 1))), self.library), [])


class TestRecognitionDebouncer(unittest.TestCase):
    """Test recognition event debouncing."""

    def setUp(self):
        self.cfg = load_config()
        self.debouncer = RecognitionDebouncer(self.cfg)

    def test_hello_bye_sequence(self):
        """Test same-label and label-switch cooldowns on a scripted sequence."""
        self.assertEqual(self.debouncer.update(candidates("HELLO"), 0.0), "HELLO")
        self.assertIsNone(self.debouncer.update(candidates("HELLO"), 1.0))  # < 2000 ms, same label
        self.assertEqual(self.debouncer.update(candidates("HELLO"), 2.1), "HELLO")
        self.assertIsNone(self.debouncer.update(candidates("BYE"), 2.2))  # < 1000 ms after switch
        self.assertEqual(self.debouncer.update(candidates("BYE"), 3.3), "BYE")

        self.assertEqual(list(self.debouncer.events), ["HELLO", "HELLO", "BYE"])
        self.assertEqual(self.debouncer.state.last_label, "BYE")
        self.assertEqual(self.debouncer.state.last_timestamp, 3.3)

    def test_acceptance_threshold(self):
        """Test that a top candidate at or below 0.72 never fires."""
        self.assertIsNone(self.debouncer.update(candidates("HELLO", 0.72), 0.0))
        self.assertIsNone(self.debouncer.update(candidates("HELLO", 0.6), 5.0))
        self.assertIsNone(self.debouncer.update([], 10.0))
        self.assertIsNone(self.debouncer.state.last_label)

        self.assertEqual(self.debouncer.update(candidates("HELLO", 0.73), 10.0), "HELLO")

    def test_only_top_candidate_considered(self):
        """Test that runners-up never fire."""
        ranked = [Prediction("A", 0.8), Prediction("B", 0.79)]
        self.assertEqual(self.debouncer.update(ranked, 0.0), "A")
        self.assertIsNone(self.debouncer.update(ranked, 1.5))
        self.assertEqual(self.debouncer.update(ranked, 5.0), "A")
        self.assertEqual(list(self.debouncer.events), ["A", "A"])

    def test_rejected_frames_do_not_touch_state(self):
        """Test that suppressed frames leave the recognition memory alone."""
        self.debouncer.update(candidates("HELLO"), 0.0)
        self.debouncer.update(candidates("BYE"), 0.5)
        self.assertEqual(self.debouncer.state.last_label, "HELLO")
        self.assertEqual(self.debouncer.state.last_timestamp, 0.0)

    def test_reset(self):
        """Test that reset allows an immediate repeat."""
        self.debouncer.update(candidates("HELLO"), 0.0)
        self.debouncer.reset()
        self.assertEqual(self.debouncer.update(candidates("HELLO"), 0.1), "HELLO")
        self.assertEqual(list(self.debouncer.events), ["HELLO"])

    def test_event_log_is_bounded(self):
        """Test that only the most recent events are kept in a long session."""
        for i in range(MAX_EVENTS + 10):
            self.assertEqual(self.debouncer.update(candidates(f"W{i}"), i * 2.0), f"W{i}")

        self.assertEqual(len(self.debouncer.events), MAX_EVENTS)
        self.assertEqual(self.debouncer.events[0], "W10")
        self.assertEqual(self.debouncer.events[-1], f"W{MAX_EVENTS + 9}")


class TestOutputGuards(unittest.TestCase):
    """Test the sentence buffer, speech gate and decaying display."""

    def test_sentence_skips_adjacent_duplicates(self):
        """Test that the sentence never shows the same word twice in a row."""
        sentence = SentenceBuffer()
        for label in ["HELLO", "HELLO", "BYE", "HELLO"]:
            sentence.append(label)
        self.assertEqual(sentence.words, ["HELLO", "BYE", "HELLO"])
        self.assertEqual(sentence.text(), "HELLO BYE HELLO")

    def test_speech_gate(self):
        """Test that the same label is never forwarded twice in a row."""
        gate = SpeechGate()
        allowed = [label for label in ["A", "A", "B", "B", "A"] if gate.allow(label)]
        self.assertEqual(allowed, ["A", "B", "A"])

        gate.reset()
        self.assertTrue(gate.allow("A"))

    def test_display_decays(self):
        """Test that the confidence display empties 1500 ms after the last refresh."""
        display = PredictionDisplay(load_config())
        display.update(candidates("HELLO"), 10.0)

        self.assertEqual(len(display.current(11.0)), 1)
        display.update(candidates("BYE"), 11.0)
        self.assertEqual(display.current(12.4)[0].label, "BYE")
        self.assertEqual(display.current(12.6), [])


class TestGestureProcessor(unittest.TestCase):
    """Test the per-frame recognition chain."""

    def setUp(self):
        self.cfg = load_config()
        self.library = GestureLibrary()
        self.library.add_sample("hello", describe_pose(make_hand()))
        self.library.add_sample("bye", describe_pose(make_hand(curled=(1, 1, 1, 1, 1))))
        self.processor = GestureProcessor(self.cfg, self.library)

    def test_recognition_fires_once_per_performance(self):
        """Test that a held pose fires once and speaks once."""
        first = self.processor.process_frame(make_hand(), 0.0)
        self.assertEqual(first.recognized, "HELLO")
        self.assertEqual(first.spoken, "HELLO")
        self.assertEqual(first.predictions[0].label, "HELLO")
        self.assertEqual(first.display, first.predictions)

        for t in (0.1, 0.5, 1.0, 1.9):
            result = self.processor.process_frame(make_hand(), t)
            self.assertIsNone(result.recognized)
            self.assertIsNone(result.spoken)

        self.assertEqual(self.processor.sentence.words, ["HELLO"])

    def test_repeat_fires_but_is_not_spoken_again(self):
        """Test that a repeated gesture fires without a duplicate sentence word or speech."""
        self.processor.process_frame(make_hand(), 0.0)
        repeat = self.processor.process_frame(make_hand(), 2.5)

        self.assertEqual(repeat.recognized, "HELLO")
        self.assertIsNone(repeat.spoken)
        self.assertEqual(list(self.processor.debouncer.events), ["HELLO", "HELLO"])
        self.assertEqual(self.processor.sentence.words, ["HELLO"])

    def test_switching_gestures(self):
        """Test that a different gesture fires after the switch cooldown."""
        self.processor.process_frame(make_hand(), 0.0)
        self.assertIsNone(self.processor.process_frame(make_hand(curled=(1, 1, 1, 1, 1)), 0.5).recognized)
        switched = self.processor.process_frame(make_hand(curled=(1, 1, 1, 1, 1)), 1.2)

        self.assertEqual(switched.recognized, "BYE")
        self.assertEqual(switched.spoken, "BYE")
        self.assertEqual(self.processor.sentence.words, ["HELLO", "BYE"])

    def test_no_hand_detected(self):
        """Test that a frame without a hand clears the display and keeps recognition memory."""
        self.processor.process_frame(make_hand(), 0.0)
        result = self.processor.process_frame(None, 0.1)

        self.assertIsNone(result.pose)
        self.assertEqual(result.predictions, [])
        self.assertEqual(result.display, [])
        self.assertIsNone(result.recognized)
        self.assertEqual(self.processor.debouncer.state.last_label, "HELLO")

    def test_reset_clears_sentence_and_memory(self):
        """Test that clearing the sentence lets the same gesture fire and speak again."""
        self.processor.process_frame(make_hand(), 0.0)
        self.processor.reset()
        self.assertEqual(self.processor.sentence.words, [])

        again = self.processor.process_frame(make_hand(), 0.2)
        self.assertEqual(again.recognized, "HELLO")
        self.assertEqual(again.spoken, "HELLO")


if __name__ == '__main__':
    unittest.main()
