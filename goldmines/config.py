# === Global configuration & tuning ===
WIDTH, HEIGHT = 960, 540
FPS = 60

# Levels are generated at twice the screen size
LEVEL_WIDTH_PX = WIDTH * 2
LEVEL_HEIGHT_PX = HEIGHT * 2

# Tile edge length in world units
TILE = 32

# Path of the optional tier override file
TIER_CONFIG_PATH = "config/tiers.json"

# === Difficulty tiers ===
# Parallel tables, one column per tier
MIN_ROOMS = (8, 12, 15)
MAX_ROOMS = (12, 16, 20)
MIN_ROOM_SIZE = (8, 10, 12)
MAX_ROOM_SIZE = (12, 16, 20)
CORRIDOR_WIDTH = (2, 3, 4)
MAX_COINS = (30, 40, 50)

# === Level generation ===
ROOM_PLACEMENT_ATTEMPTS = 100
SECRET_ROOM_CHANCE = 0.2
CHESTS_PER_LEVEL = 3
CHEST_PLACEMENT_ATTEMPTS = 1000

ORE_TOTAL_RANGE = (5, 10)
ORE_PER_ROOM = 2
ORE_CENTER_EXCLUSION = 3  # rerolled while |dx| < 3 and |dy| < 3 from room center
ORE_PLACEMENT_ATTEMPTS = 50

COINS_PER_ROOM_RANGE = (3, 7)
COIN_PLACEMENT_ATTEMPTS = 100

SECRET_DOOR_INSET = 3

CRATES_PER_ROOM_RANGE = (1, 3)
CRATE_PLACEMENT_ATTEMPTS = 10
CORRIDOR_CRATE_CHANCE = 0.1
STACKED_CRATE_CHANCE = 0.3

# Values rolled when the grid is turned into entities
ORE_VALUE_RANGE = (5, 15)
CHEST_COIN_RANGE = (10, 50)
COIN_VALUE = 1
COIN_SIZE = 16

# === Enemy spawning ===
ENEMY_BASE_COUNT = 5
ENEMY_SPAWN_RATE = 2.0
ENEMY_SPAWN_ATTEMPTS = 20
ENEMY_MIN_PLAYER_DISTANCE = 1000.0

# === Enemy behavior (world units / seconds) ===
ENEMY_SIZE = 32
ENEMY_CHASE_SPEED = 150.0
ENEMY_PATROL_SPEED = 100.0
ENEMY_VISION_RADIUS = 300.0
ENEMY_AVOIDANCE_RADIUS = 50.0
ENEMY_PATROL_INTERVAL = 2.0
ENEMY_STUCK_DISTANCE = 1.0
ENEMY_STUCK_TIME = 0.5
ENEMY_ATTACK_RANGE = 50.0
ENEMY_ATTACK_DAMAGE = 20.0
ENEMY_ATTACK_COOLDOWN = 2.0
LOS_SAMPLES = 20

# === Player ===
PLAYER_SIZE = 32
PLAYER_MAX_HEALTH = 100.0
PLAYER_MAX_STAMINA = 100.0
CHEST_ORE_COST = 2
CHEST_HEAL_CHANCE = 0.25
CHEST_HEAL_AMOUNT = 40.0
CHEST_MAX_HEALTH_BONUS = 20.0
CHEST_MAX_STAMINA_BONUS = 20.0
CHEST_SPEED_BONUS = 0.2
