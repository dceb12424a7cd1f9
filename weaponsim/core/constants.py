"""
Constants for the weapon simulator.

Defines the default weapon configuration, the reserved damage-type labels and
the limits of the random source used throughout the simulator.
"""

# Number of random bytes fetched at once by the random source.
BUFFER_LENGTH = 256

# A single draw consumes one byte, so dice cannot have more faces than this.
MAX_DIE_SIDES = 256

# Damage type used for the base damage of a weapon.
PHYSICAL_DAMAGE = "Physical"

# Derived entry added to every averaged damage map.
TOTAL_DAMAGE = "Total Damage"

# Weapon defaults.
DEFAULT_WEAPON_NAME = "Unnamed Weapon"
DEFAULT_MIN_CRIT = 19
DEFAULT_CRIT_MULTIPLIER = 2
DEFAULT_BASE_DAMAGE = "1d4"

# Bounds of the critical range on a d20.
MIN_CRIT_LOWER_BOUND = 2
MIN_CRIT_UPPER_BOUND = 20

# Number of simulated attacks per run.
DEFAULT_ITERATIONS = 100

# Faces of the attack die.
ATTACK_DIE_SIDES = 20
