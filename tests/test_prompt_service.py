"""Tests for saved prompt persistence and export."""

from datetime import datetime

from promptstudio.models import Prompt
from promptstudio.services import prompts as prompt_service


class TestDisplay:
    def test_truncate(self):
        assert prompt_service.truncate_text("a" * 200) == "a" * 200
        assert prompt_service.truncate_text("a" * 201) == "a" * 200 + "..."
        assert prompt_service.truncate_text(None) == ""

    def test_process_for_display(self):
        prompt = Prompt(id=1, title="T", framework_type="cot", final_prompt_text="x" * 300,
                        created_at=datetime(2024, 1, 1))
        [shown] = prompt_service.process_for_display([prompt], is_premium=True)
        assert shown.can_export is True
        assert shown.truncated_text.endswith("...")


class TestExport:
    def test_export_content(self):
        prompt = Prompt(title="Launch plan", framework_type="tot", final_prompt_text="Do it.",
                        created_at=datetime(2024, 3, 5, 9, 30))
        assert prompt_service.generate_export_content(prompt) == (
            "# Launch plan\n\nFramework: tot\nCreated: 2024-03-05T09:30:00\n\n---\n\nDo it."
        )
        assert prompt_service.export_filename(prompt) == "launch_plan.txt"


class TestPersistence:
    async def test_create_and_list(self, db, user):
        first = await prompt_service.create_prompt(db, user.id, "cot", "  First  ", "one")
        second = await prompt_service.create_prompt(db, user.id, "role", "Second", "two")
        assert first.title == "First"

        listed = await prompt_service.list_prompts_for_user(db, user.id)
        assert [p.id for p in listed] == [second.id, first.id]
        assert await prompt_service.count_prompts_for_user(db, user.id) == 2

    async def test_ownership(self, db, user, premium_user):
        prompt = await prompt_service.create_prompt(db, user.id, "cot", "Mine", "text")
        assert await prompt_service.get_user_prompt(db, prompt.id, premium_user.id) is None
        assert await prompt_service.delete_prompt(db, prompt.id, premium_user.id) is False
        assert await prompt_service.delete_prompt(db, prompt.id, user.id) is True
        assert await prompt_service.get_user_prompt(db, prompt.id, user.id) is None
