from dataclasses import dataclass, field


@dataclass
class InMemoryFileManager:
    """Dict-backed file manager for tests and dry runs."""

    files: dict[str, str] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def exists(self, path: str) -> bool:
        return path in self.files

    def read(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(f"File not found: {path}") from None

    def write(self, path: str, content: str) -> None:
        self.files[path] = content
        self.writes.append(path)
