"""
Spoken narration using pyttsx3.

Speech runs on a background thread so the engine's event handlers never
block; messages queue up (bounded) and play one at a time.
"""

import logging
import threading
from collections import deque

import pyttsx3

logger = logging.getLogger(__name__)


class VoiceNarrator:
    """
    Narrator backed by the local speech synthesizer.

    If the synthesizer cannot be initialised the narrator stays silent
    (``available`` is False) instead of failing the host.
    """

    def __init__(self, rate=150, volume=0.8, voice_hint=None, max_queue=5):
        """
        Args:
            rate (int): Words per minute
            volume (float): 0.0-1.0
            voice_hint (str): Substring of a preferred voice id/name
            max_queue (int): Messages kept while speaking; oldest drop first
        """
        self.engine = None
        self.is_speaking = False
        self.message_queue = deque(maxlen=max_queue)
        self._lock = threading.Lock()

        try:
            self.engine = pyttsx3.init()
            self.engine.setProperty('rate', rate)
            self.engine.setProperty('volume', volume)
            if voice_hint:
                self._select_voice(voice_hint)
        except Exception as e:
            logger.warning("[VoiceNarrator] Speech synthesis unavailable: %s", e)
            self.engine = None

    @property
    def available(self):
        return self.engine is not None

    def _select_voice(self, hint):
        hint = hint.lower()
        for voice in self.engine.getProperty('voices'):
            if hint in voice.id.lower() or hint in (voice.name or "").lower():
                self.engine.setProperty('voice', voice.id)
                logger.info("[VoiceNarrator] Using voice %s", voice.name)
                return
        logger.info("[VoiceNarrator] No voice matching %r, keeping default", hint)

    def speak(self, message):
        """Queue a message; starts the worker thread if idle."""
        if not self.engine or not message:
            return

        with self._lock:
            self.message_queue.append(message)
            if self.is_speaking:
                return
            self.is_speaking = True

        threading.Thread(target=self._process_queue, daemon=True).start()

    def _process_queue(self):
        while True:
            with self._lock:
                if not self.message_queue:
                    self.is_speaking = False
                    return
                message = self.message_queue.popleft()
            try:
                self.engine.say(message)
                self.engine.runAndWait()
            except Exception as e:
                logger.warning("[VoiceNarrator] Playback failed: %s", e)
