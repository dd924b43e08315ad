"""Abstract base scanner."""

from __future__ import annotations

import abc

from project_context.models import FileFacts, Language


class BaseScanner(abc.ABC):
    """Base class for language-specific fact extractors.

    Scanners are pure: they take file text and return facts. Reading files
    and recovering from I/O errors is the caller's job.
    """

    languages: tuple[Language, ...]

    def extract(self, content: str, language: Language) -> FileFacts:
        return FileFacts(
            imports=self.extract_imports(content),
            exports=self.extract_exports(content),
            functions=self.extract_functions(content),
            classes=self.extract_classes(content),
            interfaces=self.extract_interfaces(content, language),
            type_aliases=self.extract_type_aliases(content, language),
        )

    @abc.abstractmethod
    def extract_imports(self, content: str) -> list:
        """Return the import records found in *content*."""

    def extract_exports(self, content: str) -> list:
        return []

    def extract_functions(self, content: str) -> list:
        return []

    def extract_classes(self, content: str) -> list:
        return []

    def extract_interfaces(self, content: str, language: Language) -> list:
        return []

    def extract_type_aliases(self, content: str, language: Language) -> list:
        return []
