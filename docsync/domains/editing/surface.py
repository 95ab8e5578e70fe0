from typing import List, Optional, Protocol, Tuple, runtime_checkable

# Команды форматирования, которые умеет панель инструментов редактора
FORMAT_COMMANDS = (
    "bold",
    "italic",
    "underline",
    "justifyLeft",
    "justifyCenter",
    "justifyRight",
    "insertUnorderedList",
    "insertOrderedList",
)


@runtime_checkable
class RichTextSurface(Protocol):
    """Поверхность редактирования форматированного текста"""

    def get_serialized_content(self) -> str:
        ...

    def set_serialized_content(self, content: str) -> None:
        ...

    def exec_command(self, command: str, value: Optional[str] = None) -> None:
        ...


class InMemorySurface:
    """Поверхность без рендеринга: хранит разметку строкой и журнал команд"""

    def __init__(self, content: str = ""):
        self._content = content
        self.commands: List[Tuple[str, Optional[str]]] = []
        self.seed_count = 0

    def get_serialized_content(self) -> str:
        return self._content

    def set_serialized_content(self, content: str) -> None:
        self._content = content
        self.seed_count += 1

    def exec_command(self, command: str, value: Optional[str] = None) -> None:
        self.commands.append((command, value))

    def input(self, content: str) -> None:
        """Ввод пользователя: меняет содержимое, но не считается засевом"""
        self._content = content
