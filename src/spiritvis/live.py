"""
Live window: the animation loop in an OpenCV window, chat typed on the
terminal and shown as an overlay panel ('h' toggles it, ESC quits).
"""

import logging
import sys
import textwrap
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import cv2

from spiritvis.animation_driver import AnimationDriver
from spiritvis.chat_client import ChatSession
from spiritvis.constants import (
    CAMERA_ENABLED_BUMP,
    CHAT_PANEL_LINES,
    CHAT_PANEL_WRAP,
    CHAT_REPLY_BUMP,
    DEFAULT_FPS,
    MIC_ENABLED_BUMP,
    WINDOW_NAME,
)
from spiritvis.devices import DeviceUnavailable

logger = logging.getLogger(__name__)

ESC = 27
FONT = cv2.FONT_HERSHEY_SIMPLEX


class LiveApp:
    def __init__(self, width, height, fps=DEFAULT_FPS, proxy_url=None, driver=None, chat=None):
        self.driver = driver if driver is not None else AnimationDriver(width, height)
        self.fps = fps
        self.executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="spiritvis")
        if chat is None:
            kwargs = {"proxy_url": proxy_url} if proxy_url else {}
            chat = ChatSession(on_reply=self._on_reply, **kwargs)
        self.chat = chat
        self.panel_visible = True
        self.status = {"mic": "off", "cam": "off"}
        self.running = False

    # --- Events from other threads -------------------------------------

    def _on_reply(self, reply):
        self.driver.post(lambda: self.driver.bump_pulse(CHAT_REPLY_BUMP))

    def enable_audio(self, opener, *args):
        """Open an audio source in the background; install it when ready."""
        future = self.executor.submit(opener, *args)
        future.add_done_callback(lambda f: self.driver.post(lambda: self._audio_ready(f)))
        return future

    def enable_camera(self, opener, *args):
        future = self.executor.submit(opener, *args)
        future.add_done_callback(lambda f: self.driver.post(lambda: self._camera_ready(f)))
        return future

    def _audio_ready(self, future):
        try:
            source = future.result()
        except DeviceUnavailable as e:
            logger.warning(f"[!] Mic error: {e}")
            self.status["mic"] = "unavailable"
            return
        self.driver.install_audio(source)
        self.status["mic"] = "ON"
        self.driver.bump_pulse(MIC_ENABLED_BUMP)

    def _camera_ready(self, future):
        try:
            camera = future.result()
        except DeviceUnavailable as e:
            logger.warning(f"[!] Cam error: {e}")
            self.status["cam"] = "unavailable"
            return
        self.driver.install_camera(camera)
        self.status["cam"] = "ON"
        self.driver.bump_pulse(CAMERA_ENABLED_BUMP)

    def _read_stdin(self):
        for line in sys.stdin:
            if not self.running:
                break
            self.chat.submit(self.executor, line)

    # --- Render thread ---------------------------------------------------

    def handle_key(self, key):
        if key in (ord("h"), ord("H")):
            self.panel_visible = not self.panel_visible
        elif key == ESC:
            self.running = False

    def panel_lines(self):
        lines = []
        for entry in self.chat.recent(CHAT_PANEL_LINES):
            wrapped = textwrap.wrap(f"{entry.speaker}: {entry.text}", CHAT_PANEL_WRAP)
            lines.extend((line, entry.kind) for line in wrapped)
        if self.chat.busy:
            lines.append(("spirit is listening...", "ai"))
        return lines[-CHAT_PANEL_LINES:]

    def draw_overlay(self, frame):
        """Draw the status line and, when visible, the chat panel onto `frame`."""
        status = f"mic: {self.status['mic']}   cam: {self.status['cam']}   [h] chat   [esc] quit"
        cv2.putText(frame, status, (12, 24), FONT, 0.5, (200, 200, 200), 1, cv2.LINE_AA)
        if not self.panel_visible:
            return frame

        lines = self.panel_lines()
        line_height = 22
        h = frame.shape[0]
        top = h - 16 - line_height * len(lines)
        panel = frame[max(0, top - 8):h - 8, 8:8 + 12 * CHAT_PANEL_WRAP]
        panel[:] = (panel * 0.4).astype(panel.dtype)

        for i, (text, kind) in enumerate(lines):
            color = (255, 220, 180) if kind == "ai" else (220, 220, 220)
            y = top + line_height * (i + 1) - 6
            cv2.putText(frame, text, (16, y), FONT, 0.5, color, 1, cv2.LINE_AA)
        return frame

    def _sync_window_size(self):
        _, _, w, h = cv2.getWindowImageRect(WINDOW_NAME)
        state = self.driver.state
        if w > 0 and h > 0 and (w, h) != (state.width, state.height):
            self.driver.resize(w, h)

    def run(self):
        s = self.driver.state
        cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(WINDOW_NAME, s.width, s.height)
        self.running = True
        threading.Thread(target=self._read_stdin, daemon=True).start()
        logger.info("[+] Type a message and press enter to speak with the spirit")

        frame_time = 1.0 / self.fps
        try:
            while self.running:
                start = time.perf_counter()
                frame = self.draw_overlay(self.driver.make_frame().copy())
                cv2.imshow(WINDOW_NAME, frame)
                self.handle_key(cv2.waitKey(1) & 0xFF)

                if cv2.getWindowProperty(WINDOW_NAME, cv2.WND_PROP_VISIBLE) < 1:
                    self.running = False
                    break
                self._sync_window_size()

                elapsed = time.perf_counter() - start
                if elapsed < frame_time:
                    time.sleep(frame_time - elapsed)
        finally:
            self.running = False
            self.driver.close()
            self.executor.shutdown(wait=False, cancel_futures=True)
            cv2.destroyAllWindows()
