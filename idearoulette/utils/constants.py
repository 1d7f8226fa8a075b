"""Constants used throughout the application."""

# MongoDB collections
USERS_COLLECTION = "users"
IDEAS_COLLECTION = "ideas"
INTERACTIONS_COLLECTION = "idea_interactions"
SESSIONS_COLLECTION = "user_sessions"
BEHAVIOR_COLLECTION = "user_behavior"

# Feed tuning
PREFETCH_THRESHOLD = 15
BATCH_SIZE = 15
INITIAL_BATCH_SIZE = 30
INITIAL_LOAD_MINIMUM = 10

# Seen-set bounds
SEEN_IDEAS_LIMIT = 200
EXCLUDED_NAMES_IN_PROMPT = 50

# Preference traits
HIGH_STANDARDS_RATING = 9.0
HIGH_STANDARDS_TRAIT = "high-standards"
TECH_SAVVY_TRAIT = "tech-savvy"
TECH_SAVVY_TAG = "AI"

# Personality
PERSONALITY_UNLOCK_SWIPES = 10
IDEA_COLLECTOR_LIKES = 20
ROULETTE_MASTER_SWIPES = 100

TECH_VISIONARY = "Tech Visionary"
COMMUNITY_BUILDER = "Community Builder"
AI_PIONEER = "AI Pioneer"
IDEA_COLLECTOR = "Idea Collector"
ROULETTE_MASTER = "Roulette Master"
EMERGING_FOUNDER = "Emerging Founder"

# Generation
REMIX_COUNT = 3
IDEA_TEMPERATURE = 0.9
REMIX_TEMPERATURE = 0.8

DIVERSITY_PROMPTS = [
    "Focus on emerging technologies and unexpected combinations",
    "Think about problems that don't have solutions yet",
    "Combine traditional industries with modern tech",
    "Focus on underserved markets and niche communities",
    "Think about post-pandemic lifestyle changes",
    "Consider climate change and sustainability angles",
    "Explore AR/VR and spatial computing possibilities",
    "Think about aging population and accessibility",
    "Consider remote work and digital nomad trends",
    "Focus on mental health and wellness innovations",
]

ICON_OPTIONS = [
    "brain", "rocket", "heart", "zap", "users", "globe", "smartphone", "laptop",
    "camera", "music", "gamepad2", "plane", "car", "home", "briefcase", "shield",
    "leaf", "dollar-sign", "lightbulb", "target", "trending-up", "wifi",
    "headphones", "microphone", "video", "image", "book", "pencil", "scissors",
    "wrench", "settings", "bell", "clock", "calendar", "map-pin", "search",
    "filter", "star", "flag", "gift", "crown", "diamond", "key", "lock",
    "unlock", "eye", "hand", "fingerprint",
]

# Notices
NOTICE_LIMIT = 5

# Sessions
SESSION_FLUSH_INTERVAL = 10

# Onboarding
MIN_ONBOARDING_INTERESTS = 3
