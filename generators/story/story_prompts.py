from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class StoryPrompt:
    system_instruction_path: str = field(
        default_factory=lambda: str(Path(__file__).resolve().parent / "system_instruction.txt")
    )

    _system_instruction: Optional[str] = field(init=False, repr=False, default=None)

    @staticmethod
    def _read_text(path: str, label: str) -> str:
        file_path = Path(path)
        try:
            return file_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"{label} file not found at {file_path}") from exc

    @property
    def system_instruction(self) -> str:
        if self._system_instruction is None:
            self._system_instruction = self._read_text(
                self.system_instruction_path, "System instruction"
            )
        return self._system_instruction

    @staticmethod
    def generate_user_prompt(prompt: str) -> str:
        if not (prompt or "").strip():
            raise ValueError("User prompt must not be empty")
        return prompt
