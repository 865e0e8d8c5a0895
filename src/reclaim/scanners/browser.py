"""Scanner for web browser caches."""

from __future__ import annotations

from reclaim.models.category import Category
from reclaim.models.scanner import FixedPathScanner, Target

_TARGETS = (
    # macOS
    Target("Library/Caches/Google/Chrome", "Google Chrome", "com.google.Chrome"),
    Target("Library/Caches/Firefox/Profiles", "Firefox", "org.mozilla.firefox"),
    Target("Library/Caches/com.apple.Safari", "Safari", "com.apple.Safari"),
    Target("Library/Caches/BraveSoftware/Brave-Browser", "Brave", "com.brave.Browser"),
    Target("Library/Caches/com.microsoft.edgemac", "Microsoft Edge", "com.microsoft.edgemac"),
    Target("Library/Caches/com.operasoftware.Opera", "Opera", "com.operasoftware.Opera"),
    # XDG
    Target(".cache/google-chrome", "Google Chrome", "com.google.Chrome"),
    Target(".cache/chromium", "Chromium", "org.chromium.Chromium"),
    Target(".cache/mozilla/firefox", "Firefox", "org.mozilla.firefox"),
    Target(".cache/BraveSoftware/Brave-Browser", "Brave", "com.brave.Browser"),
    Target(".cache/microsoft-edge", "Microsoft Edge", "com.microsoft.edgemac"),
    Target(".cache/opera", "Opera", "com.operasoftware.Opera"),
)

# Process names each browser runs under
_PROCESS_NAMES: dict[str, tuple[str, ...]] = {
    "com.google.Chrome": ("Google Chrome", "chrome", "google-chrome"),
    "org.chromium.Chromium": ("Chromium", "chromium", "chromium-browser"),
    "org.mozilla.firefox": ("firefox", "firefox-bin", "firefox-esr"),
    "com.apple.Safari": ("Safari",),
    "com.brave.Browser": ("Brave Browser", "brave", "brave-browser"),
    "com.microsoft.edgemac": ("Microsoft Edge", "msedge", "microsoft-edge"),
    "com.operasoftware.Opera": ("Opera", "opera"),
}


class BrowserScanner(FixedPathScanner):
    """Reports browser caches of 500 KB or more.

    A browser counts as running only when one of its own process names
    is running; substring matches are not used, so "opera" does not match
    an unrelated "operator" process.
    """

    category = Category.BROWSER
    min_size = 500_000

    @property
    def _targets(self) -> tuple[Target, ...]:
        return _TARGETS

    def _in_use(self, app_id: str | None, app_name: str | None, token: str) -> bool:
        if app_id is None:
            return False
        oracle = self.context.oracle
        identifiers = (app_id, *_PROCESS_NAMES.get(app_id, ()))
        return any(oracle.is_running(identifier) for identifier in identifiers)
