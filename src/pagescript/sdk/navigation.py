"""``navigation`` capability group: thin delegation to the host navigator."""

from __future__ import annotations

from pagescript.ports import Navigator

from ._surface import CapabilityGroup


class NavigationCapabilities:
    def __init__(self, navigator: Navigator) -> None:
        self._nav = navigator

    def navigate(self, url: str) -> None:
        self._nav.navigate(str(url))

    def back(self) -> bool:
        return self._nav.back()

    def forward(self) -> bool:
        return self._nav.forward()

    def reload(self) -> None:
        self._nav.reload()

    def new_tab(self, url: str | None = None) -> str:
        return self._nav.new_tab(url)

    def close_tab(self) -> None:
        self._nav.close_tab()

    def current_url(self) -> str:
        return self._nav.current_url()

    def title(self) -> str:
        return self._nav.title()

    def group(self) -> CapabilityGroup:
        return CapabilityGroup(
            "navigation",
            {
                "navigate": self.navigate,
                "back": self.back,
                "forward": self.forward,
                "reload": self.reload,
                "newTab": self.new_tab,
                "closeTab": self.close_tab,
                "currentUrl": self.current_url,
                "title": self.title,
            },
        )
