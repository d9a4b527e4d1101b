# --- Configuration Constants ---
DEFAULT_FPS = 60
DEFAULT_RESOLUTION = (1280, 720)
WINDOW_NAME = "spiritvis"

# Spectrum analyser (mirrors a browser AnalyserNode)
FFT_SIZE = 1024
SPECTRUM_SMOOTHING = 0.8  # 0.0 = no smoothing, 0.9 = very sluggish
MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0
SAMPLE_RATE = 44100

# Frequency bands as fractions of the bin range: low, mid, high
BAND_EDGES = (0.0, 0.12, 0.40, 0.90)
PEAK_WEIGHTS = (0.6, 0.3, 0.1)
PEAK_THRESHOLD = 0.72
PEAK_QUIET_LEVEL = 0.4  # peak bumps only fire below this pulse
PEAK_PULSE = 1.2

# Pulse
PULSE_MAX = 2.0
PULSE_DECAY = 0.96
CHAT_REPLY_BUMP = 1.1
MIC_ENABLED_BUMP = 0.9
CAMERA_ENABLED_BUMP = 0.6

# Flow field
FLOW_SCALE = 0.0015
PHASE_STEP = 0.0008
NOISE_OCTAVES = 4
NOISE_PERSISTENCE = 0.5
BRIGHTNESS_BIAS = 0.3

# Particle system settings
PARTICLE_COUNT = 600
PARTICLE_SPEED_RANGE = (0.6, 2.2)
PARTICLE_HUE_RANGE = (200.0, 260.0)  # blue-ish
PARTICLE_SIZE_RANGE = (0.6, 1.8)
PARTICLE_SATURATION = 70
PARTICLE_BRIGHTNESS = 80
RESPAWN_PULSE = 1.0
RESPAWN_CHANCE = 0.02
RESPAWN_RADIUS = (20.0, 60.0)

# Avatar glow
AVATAR_LAYERS = 6
AVATAR_BASE_HUE = 220.0
AVATAR_SATURATION = 80
AVATAR_BRIGHTNESS = 75

# Trail effect: black overlay opacity per frame
TRAIL_FADE = 0.12

# Camera / brightness probe
CAMERA_CAPTURE_SIZE = (320, 240)
CAMERA_PROBE_SIZE = (160, 120)
PROBE_INTERVAL = 6  # frames
PROBE_STRIDE = 10  # pixels

# Chat panel overlay
CHAT_PANEL_LINES = 8
CHAT_PANEL_WRAP = 60
