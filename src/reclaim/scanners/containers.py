"""Scanner for reclaimable Docker data."""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path

from reclaim.models.category import Category
from reclaim.models.scan_result import CandidateItem
from reclaim.models.scanner import CategoryScanner
from reclaim.utils import directory_size

log = logging.getLogger(__name__)

# Kinds of data the docker CLI can prune
KIND_IMAGES = "images"
KIND_CONTAINERS = "containers"
KIND_BUILD_CACHE = "build_cache"

# Placeholder paths that identify tool-managed items
IMAGES_PATH = Path("/var/run/docker/images")
CONTAINERS_PATH = Path("/var/run/docker/containers")
BUILD_CACHE_PATH = Path("/var/run/docker/build-cache")

_BACKING_STORE = "Library/Containers/com.docker.docker/Data"
_BACKING_STORE_MIN_SIZE = 100_000_000

_UNITS = (
    ("TB", 1_000_000_000_000),
    ("GB", 1_000_000_000),
    ("MB", 1_000_000),
    ("kB", 1_000),
    ("B", 1),
)

_PARENTHETICAL = re.compile(r"\s*\(.*\)")


def parse_docker_size(text: str) -> int:
    """Parse a docker size string such as ``1.5GB`` or ``20MB (100%)``.

    Docker uses decimal units. Anything unparsable, negative or non-finite
    counts as 0.
    """
    cleaned = _PARENTHETICAL.sub("", text).strip()
    for unit, multiplier in _UNITS:
        if cleaned.endswith(unit):
            number = cleaned[: -len(unit)].strip()
            try:
                value = float(number) * multiplier
            except ValueError:
                return 0
            if not math.isfinite(value) or value < 0:
                return 0
            return int(value)
    return 0


def _sum_sizes(output: str) -> int:
    return sum(parse_docker_size(line) for line in output.splitlines() if line.strip())


class ContainersScanner(CategoryScanner):
    """Reports dangling images, stopped containers and build cache.

    Sizes come from the docker CLI; a failing command contributes nothing.
    The Docker Desktop disk image is listed for information but never
    selected and cannot be cleaned through the CLI.
    """

    category = Category.CONTAINERS

    @property
    def unavailable_reason(self) -> str | None:
        if not self.context.runner.available():
            return "Docker is not installed"
        return None

    def scan(self) -> list[CandidateItem]:
        if not self.context.runner.available():
            return []

        found = (
            (IMAGES_PATH, "Dangling images", KIND_IMAGES, self._dangling_images_size()),
            (CONTAINERS_PATH, "Stopped containers", KIND_CONTAINERS, self._stopped_containers_size()),
            (BUILD_CACHE_PATH, "Build cache", KIND_BUILD_CACHE, self._build_cache_size()),
        )
        items = [
            CandidateItem(
                path=path,
                name=name,
                size_bytes=size,
                category=self.category,
                tool_kind=kind,
                selected=self._auto_select(),
            )
            for path, name, kind, size in found
            if size > 0
        ]

        backing_store = self.home / _BACKING_STORE
        if backing_store.is_dir():
            # Lives under a protected root, so it is measured without pruning.
            size = directory_size(backing_store)
            if size > _BACKING_STORE_MIN_SIZE:
                items.append(
                    CandidateItem(
                        path=backing_store,
                        name="Docker Desktop data",
                        size_bytes=size,
                        category=self.category,
                        selected=False,
                    )
                )

        return items

    def _docker(self, args: list[str]) -> str:
        result = self.context.runner.run(args)
        if not result.success:
            log.debug("docker %s failed (%d): %s", " ".join(args), result.returncode, result.stderr.strip())
            return ""
        return result.stdout

    def _dangling_images_size(self) -> int:
        return _sum_sizes(self._docker(["images", "-f", "dangling=true", "--format", "{{.Size}}"]))

    def _stopped_containers_size(self) -> int:
        return _sum_sizes(self._docker(["ps", "-a", "-f", "status=exited", "--format", "{{.Size}}"]))

    def _build_cache_size(self) -> int:
        output = self._docker(["system", "df", "--format", "{{.Type}}\t{{.Reclaimable}}"])
        for line in output.splitlines():
            parts = line.split("\t")
            if len(parts) >= 2 and parts[0].strip() == "Build Cache":
                return parse_docker_size(parts[1])
        return 0
