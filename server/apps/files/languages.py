"""Languages available for shared code snippets."""

from typing import Final

from django.db import models


class Language(models.TextChoices):
    """Snippet language; the label is the display name."""

    PHP = 'php', 'PHP'
    JAVASCRIPT = 'javascript', 'JavaScript'
    TYPESCRIPT = 'typescript', 'TypeScript'
    PYTHON = 'python', 'Python'
    JAVA = 'java', 'Java'
    CSHARP = 'csharp', 'C#'
    CPP = 'cpp', 'C++'
    C = 'c', 'C'
    GO = 'go', 'Go'
    RUST = 'rust', 'Rust'
    RUBY = 'ruby', 'Ruby'
    SWIFT = 'swift', 'Swift'
    KOTLIN = 'kotlin', 'Kotlin'
    HTML = 'html', 'HTML'
    CSS = 'css', 'CSS'
    SQL = 'sql', 'SQL'
    BASH = 'bash', 'Bash'
    JSON = 'json', 'JSON'
    XML = 'xml', 'XML'
    MARKDOWN = 'markdown', 'Markdown'
    YAML = 'yaml', 'YAML'
    TEXT = 'text', 'Plain Text'


_EXTENSIONS: Final[dict[Language, str]] = {
    Language.PHP: 'php',
    Language.JAVASCRIPT: 'js',
    Language.TYPESCRIPT: 'ts',
    Language.PYTHON: 'py',
    Language.JAVA: 'java',
    Language.CSHARP: 'cs',
    Language.CPP: 'cpp',
    Language.C: 'c',
    Language.GO: 'go',
    Language.RUST: 'rs',
    Language.RUBY: 'rb',
    Language.SWIFT: 'swift',
    Language.KOTLIN: 'kt',
    Language.HTML: 'html',
    Language.CSS: 'css',
    Language.SQL: 'sql',
    Language.BASH: 'sh',
    Language.JSON: 'json',
    Language.XML: 'xml',
    Language.MARKDOWN: 'md',
    Language.YAML: 'yaml',
    Language.TEXT: 'txt',
}


def extension_for(language: Language) -> str:
    """Get file extension used when storing a snippet.

    Args:
        language: Snippet language.

    Returns:
        Extension without dot (e.g., 'py').
    """
    return _EXTENSIONS[language]
