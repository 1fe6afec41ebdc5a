"""
Morphological analyzer backends.

The stem filter only needs `analyze(word) -> List[str]`: the raw lines the
analyzer printed for one word. Parsing and validation of those lines is the
aggregator's job, so backends pass output through as-is, except
lines that could not be decoded, which are dropped.

Backends:
- SubprocessAnalyzer: runs an external lookup command (e.g. `flookup trmorph.fst`)
- StaticAnalyzer: canned output from a mapping (fixtures, offline runs)
"""

from abc import ABC, abstractmethod
from typing import List, Mapping, Sequence, Union
import logging
import shlex
import shutil
import subprocess

from .errors import AnalyzerConfigError

logger = logging.getLogger(__name__)

# Substituted for bytes that are not valid in the configured encoding
UNDECODABLE = "\ufffd"


class BaseAnalyzer(ABC):
    """
    Abstract base class for morphological analyzers.

    All analyzers must implement this interface to be swappable.
    """

    @abstractmethod
    def analyze(self, word: str) -> List[str]:
        """
        Run morphological analysis for a single word.

        Args:
            word: Surface form to analyze

        Returns:
            Raw output lines, possibly empty when analysis failed
            or was interrupted
        """
        pass

    @abstractmethod
    def get_info(self) -> dict:
        """
        Get information about the analyzer backend.

        Returns:
            Dict with keys: type, plus backend-specific details
        """
        pass

    def close(self):
        """Optional cleanup (stop helper processes, release files, etc.)"""
        pass


class SubprocessAnalyzer(BaseAnalyzer):
    """
    Analyzer backed by an external lookup process.

    A new process is started per word: the word is written to stdin and
    the complete stdout is returned split into lines. `subprocess.run`
    feeds stdin and drains stdout concurrently, so large outputs cannot
    deadlock on a full pipe, and the child is always waited for.
    """

    def __init__(
        self,
        command: Union[str, Sequence[str]],
        timeout: float = 5.0,
        encoding: str = "utf-8"
    ):
        """
        Initialize subprocess analyzer.

        Args:
            command: Lookup command line, e.g. "flookup -b /opt/trmorph/stem.fst"
                (string is split with shlex) or an argv list
            timeout: Seconds to wait for a single analysis before giving up
            encoding: Encoding used for stdin/stdout

        Raises:
            AnalyzerConfigError: command is empty or executable not found
        """
        argv = shlex.split(command) if isinstance(command, str) else list(command)
        if not argv:
            raise AnalyzerConfigError("Analyzer command is empty")

        executable = shutil.which(argv[0])
        if executable is None:
            raise AnalyzerConfigError(f"Analyzer executable not found: {argv[0]}")

        self.argv = [executable] + argv[1:]
        self.timeout = timeout
        self.encoding = encoding
        logger.info(f"SubprocessAnalyzer initialized: {' '.join(self.argv)} (timeout={timeout}s)")

    def analyze(self, word: str) -> List[str]:
        """Run the lookup command for one word and return its output lines."""
        try:
            result = subprocess.run(
                self.argv,
                input=word + "\n",
                capture_output=True,
                text=True,
                encoding=self.encoding,
                errors="replace",
                timeout=self.timeout,
                check=False
            )
        except subprocess.TimeoutExpired:
            # run() kills and reaps the child before raising
            logger.warning(f"Analyzer timed out after {self.timeout}s for word {word!r}")
            return []
        except OSError as e:
            logger.error(f"Failed to start analyzer for word {word!r}: {e}")
            return []

        if result.returncode != 0:
            logger.warning(
                f"Analyzer exited with code {result.returncode} for word {word!r}: "
                f"{result.stderr.strip()}"
            )
            return []

        lines = []
        for line in result.stdout.splitlines():
            if UNDECODABLE in line:
                logger.warning(f"Dropping undecodable analyzer line for word {word!r}: {line!r}")
                continue
            lines.append(line)
        return lines

    def get_info(self) -> dict:
        return {
            "type": "subprocess",
            "command": " ".join(self.argv),
            "timeout": self.timeout,
        }


class StaticAnalyzer(BaseAnalyzer):
    """Analyzer that returns pre-recorded output lines per word."""

    def __init__(self, parses: Mapping[str, Sequence[str]]):
        self.parses = {word: list(lines) for word, lines in parses.items()}
        self.calls = 0

    def analyze(self, word: str) -> List[str]:
        self.calls += 1
        return list(self.parses.get(word, []))

    def get_info(self) -> dict:
        return {
            "type": "static",
            "words": len(self.parses),
        }
