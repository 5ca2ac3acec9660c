"""
Client-side application state

One explicit object holds the signed-in session, user and profile. Screens
subscribe to it and are told whenever any of the three changes.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[['AppState'], None]


class AppState:
    """Session, user and profile with change notification"""

    def __init__(self):
        self._session: Optional[Dict[str, Any]] = None
        self._user: Optional[Dict[str, Any]] = None
        self._profile: Optional[Dict[str, Any]] = None
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    @property
    def session(self):
        return self._session

    @property
    def user(self):
        return self._user

    @property
    def profile(self):
        return self._profile

    @property
    def access_token(self) -> Optional[str]:
        return self._session.get('access_token') if self._session else None

    @property
    def is_signed_in(self) -> bool:
        return self.access_token is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with this state after every change

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception as e:
                logger.error(f"App state listener failed: {e}")

    def set_session(self, session: Optional[Dict[str, Any]]):
        """Store a sign-in response; None clears user and profile too"""
        self._session = session
        self._user = session.get('user') if session else None
        if session is None:
            self._profile = None
        elif session.get('profile') is not None:
            self._profile = session['profile']
        self._notify()

    def set_profile(self, profile: Optional[Dict[str, Any]]):
        self._profile = profile
        self._notify()

    def clear(self):
        self.set_session(None)
