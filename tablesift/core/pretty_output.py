"""
Pretty output formatting for the CLI.

Consistent terminal output for profile and validation runs.
"""

import os
from typing import List

from colorama import Fore, Style, Back

from tablesift.core.results import AnalysisResult, ValidationResult, Severity


class PrettyOutput:
    """
    Pretty output formatter for the TableSift CLI.

    Provides colors, boxes and a visual hierarchy for the profile and
    validate commands.
    """

    # Color scheme
    PRIMARY = Fore.CYAN
    SUCCESS = Fore.GREEN
    WARNING = Fore.YELLOW
    ERROR = Fore.RED
    INFO = Fore.BLUE
    HEADER = Fore.WHITE + Style.BRIGHT
    DIM = Style.DIM
    RESET = Style.RESET_ALL

    # Symbols
    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO_SYMBOL = "ℹ"

    SEVERITY_COLORS = {
        Severity.CRITICAL: Fore.RED + Style.BRIGHT,
        Severity.HIGH: Fore.RED,
        Severity.MEDIUM: Fore.YELLOW,
        Severity.LOW: Fore.GREEN,
    }

    @staticmethod
    def get_terminal_width():
        """Get terminal width, default to 80 if cannot determine."""
        try:
            return os.get_terminal_size().columns
        except OSError:
            return 80

    @staticmethod
    def header(text, width=None):
        """Print a major header with box drawing."""
        if width is None:
            width = min(PrettyOutput.get_terminal_width(), 80)

        padding = (width - len(text) - 2) // 2
        line = "═" * width

        print(f"\n{PrettyOutput.PRIMARY}╔{line}╗")
        print(f"║{' ' * padding}{text}{' ' * (width - len(text) - padding)}║")
        print(f"╚{line}╝{PrettyOutput.RESET}\n")

    @staticmethod
    def section(text, width=None):
        """Print a section header."""
        if width is None:
            width = min(PrettyOutput.get_terminal_width(), 80)

        line = "─" * width
        print(f"\n{PrettyOutput.HEADER}{line}")
        print(f"{PrettyOutput.ARROW} {text}")
        print(f"{line}{PrettyOutput.RESET}\n")

    @staticmethod
    def success(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.SUCCESS}{PrettyOutput.CHECK}{PrettyOutput.RESET} {message}")

    @staticmethod
    def error(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.ERROR}{PrettyOutput.CROSS}{PrettyOutput.RESET} {message}")

    @staticmethod
    def warning(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.WARNING}{PrettyOutput.WARN}{PrettyOutput.RESET} {message}")

    @staticmethod
    def info(message, indent=0):
        spaces = " " * indent
        print(f"{spaces}{PrettyOutput.INFO}{PrettyOutput.INFO_SYMBOL}{PrettyOutput.RESET} {message}")

    @staticmethod
    def key_value(key, value, indent=0, value_color=None):
        """Print a key-value pair."""
        spaces = " " * indent
        if value_color:
            print(f"{spaces}{PrettyOutput.DIM}{key}:{PrettyOutput.RESET} {value_color}{value}{PrettyOutput.RESET}")
        else:
            print(f"{spaces}{PrettyOutput.DIM}{key}:{PrettyOutput.RESET} {value}")

    @staticmethod
    def progress(current, total, message=""):
        """Print a progress bar line."""
        percentage = (current / total) * 100 if total > 0 else 0
        bar_length = 30
        filled = int(bar_length * current / total) if total > 0 else 0
        bar = "█" * filled + "░" * (bar_length - filled)

        print(f"  {PrettyOutput.HEADER}{bar}{PrettyOutput.RESET} {percentage:3.0f}% {message}")

    @staticmethod
    def severity_badge(severity: Severity) -> str:
        """Return a colored severity label."""
        color = PrettyOutput.SEVERITY_COLORS.get(severity, Fore.WHITE)
        return f"{color}{severity.value.upper()}{PrettyOutput.RESET}"

    @staticmethod
    def quality_indicator(score, width=20):
        """Return a visual quality bar for a 0-100 score."""
        filled = int(width * score / 100)
        empty = width - filled

        if score >= 90:
            color = Fore.GREEN
        elif score >= 70:
            color = Fore.YELLOW
        else:
            color = Fore.RED

        bar = f"{color}{'█' * filled}{PrettyOutput.DIM}{'░' * empty}{PrettyOutput.RESET}"
        return f"{bar} {score:.0f}%"

    @staticmethod
    def summary_box(title, items, width=None):
        """
        Print a summary box with items.

        Args:
            title: Box title
            items: List of (key, value, color) tuples
            width: Box width (default: 60)
        """
        if width is None:
            width = 60

        print(f"\n{PrettyOutput.PRIMARY}┌{'─' * (width - 2)}┐{PrettyOutput.RESET}")

        title_padding = (width - len(title) - 4) // 2
        print(f"{PrettyOutput.PRIMARY}│{PrettyOutput.RESET} {' ' * title_padding}{PrettyOutput.HEADER}{title}{PrettyOutput.RESET}{' ' * (width - len(title) - title_padding - 4)} {PrettyOutput.PRIMARY}│{PrettyOutput.RESET}")

        print(f"{PrettyOutput.PRIMARY}├{'─' * (width - 2)}┤{PrettyOutput.RESET}")

        for key, value, color in items:
            value_str = str(value)
            padding = width - len(key) - len(value_str) - 6
            print(f"{PrettyOutput.PRIMARY}│{PrettyOutput.RESET}  {PrettyOutput.DIM}{key}:{PrettyOutput.RESET}{' ' * padding}{color}{value_str}{PrettyOutput.RESET}  {PrettyOutput.PRIMARY}│{PrettyOutput.RESET}")

        print(f"{PrettyOutput.PRIMARY}└{'─' * (width - 2)}┘{PrettyOutput.RESET}\n")

    @staticmethod
    def blank_line():
        print()

    @staticmethod
    def analysis_summary(result: AnalysisResult):
        """Print the headline numbers of an analysis snapshot."""
        po = PrettyOutput
        total_nulls = sum(result.null_values.values())
        severity_counts = result.issues_by_severity()

        items = [
            ("Rows", f"{result.total_rows:,}", po.INFO),
            ("Columns", result.total_columns, po.INFO),
            ("Null cells", f"{total_nulls:,}", po.WARNING if total_nulls else po.SUCCESS),
            ("Duplicate rows", f"{result.duplicates:,}", po.WARNING if result.duplicates else po.SUCCESS),
            ("Contextual issues", len(result.contextual_issues), po.WARNING if result.contextual_issues else po.SUCCESS),
            ("Cross-field issues", len(result.cross_field_issues), po.WARNING if result.cross_field_issues else po.SUCCESS),
            ("Critical", severity_counts[Severity.CRITICAL.value], po.ERROR),
        ]
        po.summary_box("Profile Summary", items)
        print(f"  Quality: {po.quality_indicator(result.quality_score)}\n")

        po.section("Column Types")
        for column, column_type in result.data_types.items():
            po.key_value(column, column_type, indent=2)

    @staticmethod
    def validation_summary(results: List[ValidationResult]):
        """Print one line per validation result."""
        po = PrettyOutput
        po.section("Validation Results")
        if not results:
            po.success("No issues found", indent=2)
            return
        for result in results:
            fixable = f" {po.DIM}(auto-fix){po.RESET}" if result.can_auto_fix else ""
            print(
                f"  [{po.severity_badge(result.severity)}] {result.rule}: "
                f"{len(result.affected_rows)} row(s){fixable}"
            )
            print(f"      {po.DIM}{result.suggestion}{po.RESET}")

    @staticmethod
    def status_badge(status_text, passed=True):
        """Return a colored status badge."""
        bg = Back.GREEN if passed else Back.RED
        return f"{bg}{Fore.BLACK} {status_text} {PrettyOutput.RESET}"
