import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from companion.core.policy import PromptBudgets  # noqa: E402
from companion.prompts.builder import PromptBuilder, to_messages  # noqa: E402


class PromptBuilderTests(unittest.TestCase):
    def setUp(self):
        self.builder = PromptBuilder()

    def test_study_notes_text_is_cut_to_budget_with_marker(self):
        raw = "".join(chr(ord("a") + (i % 26)) for i in range(5000))
        prompt = self.builder.compose("study-notes", raw)

        self.assertTrue(prompt.truncated)
        self.assertEqual(prompt.embedded_text, raw[:2000] + "...")
        self.assertIn(raw[:2000] + "...\n", prompt.instruction_text)
        self.assertNotIn(raw[:2001], prompt.instruction_text)

    def test_short_text_is_embedded_unmodified(self):
        raw = "x" * 500
        prompt = self.builder.compose("study-notes", raw)

        self.assertFalse(prompt.truncated)
        self.assertEqual(prompt.embedded_text, raw)
        self.assertIn("Content:\n" + raw + "\n\n", prompt.instruction_text)
        self.assertNotIn(raw + "...", prompt.instruction_text)

    def test_resume_budget_is_larger(self):
        raw = "r" * 3000
        self.assertFalse(self.builder.compose("resume-analysis", raw).truncated)
        self.assertTrue(self.builder.compose("resume-analysis", raw + "r").truncated)

    def test_text_exactly_at_budget_is_not_marked(self):
        raw = "n" * 2000
        self.assertEqual(self.builder.compose("study-notes", raw).embedded_text, raw)

    def test_schema_description_is_embedded(self):
        resume_prompt = self.builder.build("resume-analysis", "Jane Doe, Python developer")
        for field in ("overallScore", "categoryScores", "sectionFeedback", "areasForImprovement"):
            self.assertIn(field, resume_prompt)
        self.assertIn("return ONLY valid JSON", resume_prompt)

        notes_prompt = self.builder.build("study-notes", "Photosynthesis converts light into energy.")
        for field in ("keyPoints", "quizQuestions", "correctAnswer", "flashcards", "studyTips"):
            self.assertIn(field, notes_prompt)

    def test_build_is_deterministic(self):
        text = "Same input {with braces} and $symbols"
        first = self.builder.build("study-notes", text)
        self.assertEqual(first, self.builder.build("study-notes", text))
        self.assertIn(text, first)

    def test_custom_budgets_are_honored(self):
        builder = PromptBuilder(PromptBudgets(max_input_chars={"study-notes": 10}, truncation_marker="[cut]"))
        prompt = builder.compose("study-notes", "abcdefghijklmnop")
        self.assertEqual(prompt.embedded_text, "abcdefghij[cut]")

    def test_unknown_kind_is_rejected(self):
        with self.assertRaises(ValueError):
            self.builder.build("cover-letter", "text")

    def test_prompt_is_sent_as_single_user_message(self):
        messages = to_messages("do the thing")
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].role, "user")
        self.assertEqual(messages[0].content, "do the thing")


if __name__ == "__main__":
    unittest.main()
