# -----------------------
# Layout / force field
# -----------------------
DEFAULT_ITERATIONS = 30         # relaxation steps for an explicit optimize
EDIT_RELAX_ITERATIONS = 10      # relaxation steps after a bond edit
DEFAULT_BOND_LENGTH = 1.5       # fallback covalent length for untabulated pairs
BOND_SPRING_K = 0.1             # Hookean spring constant
LJ_EPSILON = 0.1                # repulsion strength
LJ_SIGMA = 3.0                  # repulsion length scale
NONBONDED_MIN_DISTANCE = 0.01   # pairs closer than this exert no force
NONBONDED_CUTOFF = 5.0          # pairs farther than this exert no force
DEFAULT_DT = 0.1                # integration time step
DEFAULT_DAMPING = 0.9           # velocity damping per step
LARGE_MOLECULE_WARNING = 200    # all-pairs scan gets slow past this many atoms

# -----------------------
# History
# -----------------------
DEFAULT_HISTORY_MAXLEN = 50

# -----------------------
# Logging
# -----------------------
LOGGING_LEVEL = "INFO"  # options: DEBUG, INFO, WARNING, ERROR

# -----------------------
# Misc
# -----------------------
EPSILON = 1e-12  # small value to prevent div by zero
