from spiritvis.constants import PULSE_DECAY, PULSE_MAX


class PulseSignal:
    """
    A transient emphasis scalar shared by the particles and the avatar.

    Bumped by chat replies, device enables and audio peaks; decays
    multiplicatively once per frame and never reaches exactly zero.
    """

    def __init__(self, value=0.0):
        self.value = min(PULSE_MAX, max(0.0, value))

    def bump(self, amount=1.0):
        """Raise the pulse by `amount`, capped at PULSE_MAX."""
        self.value = max(0.0, min(PULSE_MAX, self.value + amount))
        return self.value

    def set(self, value):
        """Overwrite the pulse, clamped to [0, PULSE_MAX]."""
        self.value = max(0.0, min(PULSE_MAX, value))

    def decay(self):
        """Per-frame multiplicative decay."""
        self.value *= PULSE_DECAY
        return self.value

    def __float__(self):
        return float(self.value)

    def __repr__(self):
        return f"PulseSignal({self.value:.4f})"
