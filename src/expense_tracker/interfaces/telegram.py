"""
Telegram mini-app host integration for the Streamlit page.

The app is only treated as hosted when the mini-app URL carries one of the
launch query parameters (configure the bot's web app URL as ".../?tg=1").
Outside Telegram every call is skipped; nothing is attempted and caught.

Calls are delivered as a small script rendered through Streamlit components.
The script runs in a component iframe and drives Telegram.WebApp in the
parent page, loading telegram-web-app.js there first when needed.
"""

from __future__ import annotations

import json
from typing import Callable, Mapping, Optional

from expense_tracker.logging_setup import get_logger

logger = get_logger(__name__)

TELEGRAM_SDK_URL = "https://telegram.org/js/telegram-web-app.js"
LAUNCH_PARAMS = ("tg", "tgWebAppStartParam", "tgWebAppPlatform")

_SCRIPT = """
<script>
(function () {{
  const host = window.parent;
  function run() {{
    const tg = host.Telegram && host.Telegram.WebApp;
    if (!tg) return;
    {body}
  }}
  if (host.Telegram && host.Telegram.WebApp) {{
    run();
    return;
  }}
  const s = host.document.createElement("script");
  s.src = {sdk};
  s.onload = run;
  host.document.head.appendChild(s);
}})();
</script>
"""

# Clicking the main button submits the first form on the page.
_CLICK_HANDLER = """
    if (!host.__expensesMainButtonBound) {
      host.__expensesMainButtonBound = true;
      tg.MainButton.onClick(function () {
        const btn = host.document.querySelector('[data-testid="stFormSubmitButton"] button');
        if (btn) btn.click();
      });
    }
"""


def _default_emit(html: str) -> None:
    import streamlit.components.v1 as components

    components.html(html, height=0)


class TelegramHost:
    def __init__(
        self,
        enabled: bool = True,
        query_params: Optional[Mapping[str, str]] = None,
        emit: Optional[Callable[[str], None]] = None,
    ):
        self.enabled = enabled
        self.query_params = dict(query_params or {})
        self.emit = emit or _default_emit

    def is_available(self) -> bool:
        return self.enabled and any(k in self.query_params for k in LAUNCH_PARAMS)

    def _send(self, body: str) -> bool:
        if not self.is_available():
            return False
        self.emit(_SCRIPT.format(body=body, sdk=json.dumps(TELEGRAM_SDK_URL)))
        return True

    def ready(self) -> bool:
        """Tell the host the app is ready to be shown."""
        sent = self._send("tg.ready(); tg.expand();")
        if not sent:
            logger.debug("not running inside Telegram, skipping ready()")
        return sent

    def set_main_button(self, text: str, visible: bool = True, active: bool = True) -> bool:
        """Configure the host's primary action button to submit the page form."""
        params = json.dumps({"text": text, "is_visible": visible, "is_active": active}, ensure_ascii=False)
        body = f"tg.MainButton.setParams({params});" + (_CLICK_HANDLER if visible else "")
        return self._send(body)
