"""
Scope Classifier

A fast, pure heuristic that decides whether a question belongs to the
H2 Physics syllabus before any lesson is loaded or any model is called.

Why a heuristic and not a model call:
- It runs on every request, so it has to be free and instant
- It must be deterministic so the gate can be tested exhaustively
- A refusal here skips loading, chunking, retrieval and the completion call

Order of checks:
1. Empty input is refused (fail safe)
2. A deny-list hit is refused. Deny patterns are narrow phrases
   ("best football club" is denied, "projectile motion of a football" is not)
   because everyday words like "current" or "power" are also physics terms
3. A syllabus term, or two distinct everyday physics words ("unit of
   power"), is accepted
4. Anything else is refused
"""

import logging
import re

from app.services.rag.models import ScopeDecision

logger = logging.getLogger(__name__)


OUT_OF_SCOPE_REFUSAL = (
    "Sorry, I can only help with H2 Physics questions covered in these notes "
    "(for example measurements, SI units, uncertainties, kinematics, forces or "
    "energy). Please rephrase your question so it is about a physics topic."
)

# Syllabus vocabulary. Any single hit accepts. Multi-word entries are matched as phrases.
SYLLABUS_TERMS = (
    # Quantities and measurements
    "physics", "physical quantity", "physical quantities", "si unit", "si units",
    "base unit", "base units", "derived unit", "derived units",
    "base quantity", "base quantities", "derived quantity", "derived quantities",
    "prefix", "prefixes", "homogeneity", "homogeneous", "dimensional",
    "order of magnitude", "uncertainty", "uncertainties", "random error",
    "systematic error", "zero error", "percentage error", "fractional error",
    "precision", "accuracy", "significant figures",
    "scalar", "scalars", "vector", "vectors",
    "micrometer", "micrometre", "vernier", "caliper", "calipers", "oscilloscope",
    "parallax",
    # SI base units
    "metre", "kilogram", "ampere", "kelvin", "mole", "candela",
    "newton", "joule", "watt", "pascal", "coulomb", "volt", "ohm", "tesla", "hertz",
    # Mechanics
    "kinematics", "displacement", "velocity", "acceleration",
    "projectile", "free fall", "gravity", "gravitational", "gravitation",
    "dynamics", "newton's", "newtons", "inertia",
    "momentum", "impulse", "friction", "air resistance",
    "torque", "equilibrium", "centre of gravity", "center of gravity",
    "pressure", "density", "upthrust", "buoyancy",
    "work done", "kinetic", "kinetic energy", "potential energy", "efficiency",
    "circular motion", "centripetal", "angular velocity", "orbit", "orbits",
    "speed of light", "speed of sound",
    # Thermal physics
    "temperature", "thermal", "heat capacity", "specific heat", "latent heat",
    "ideal gas", "internal energy", "thermodynamics", "kinetic theory",
    # Oscillations and waves
    "oscillation", "oscillations", "simple harmonic", "shm", "amplitude", "frequency",
    "damping", "resonance", "wavelength", "superposition",
    "interference", "diffraction", "stationary wave", "standing wave", "polarisation",
    "polarization", "doppler",
    # Electricity and magnetism
    "electric field", "electric fields", "electric current", "electric charge",
    "voltage", "potential difference", "resistance", "resistivity", "resistor",
    "circuit", "circuits", "capacitor", "capacitance", "emf", "kirchhoff",
    "potential divider", "magnetic", "magnetic field", "electromagnetism",
    "electromagnetic", "induction", "flux", "faraday", "lenz", "alternating current",
    "transformer", "rectification",
    # Modern physics
    "quantum", "photon", "photons", "photoelectric", "de broglie", "energy level",
    "nuclear", "nucleus", "radioactive", "radioactivity",
    "half-life", "half life", "fission", "fusion", "binding energy",
    # Exam context
    "h2 physics", "a level physics", "a-level physics", "syllabus", "learning outcome",
    "learning outcomes",
)

# Words that are physics terms but also everyday English ("second world war",
# "power of a gaming pc"). One alone is not enough; two distinct ones are.
# Listed in singular form, plural endings are matched by the pattern.
EVERYDAY_TERMS = (
    "quantity", "measurement", "measure", "measuring", "unit", "dimension",
    "estimate", "error", "systematic", "precise", "accurate", "resultant",
    "component", "meter", "second", "kilo", "mega", "giga", "tera", "milli",
    "micro", "nano", "pico", "speed", "motion", "force", "mass", "weight",
    "collision", "drag", "moment", "energy", "power", "satellite", "heat",
    "period", "wave", "charge", "current", "spectrum", "spectra", "decay",
)

# Obviously out-of-scope requests, as narrow phrases so that "thin film
# interference" or "cooking at high altitude" still reach the allow check
DENY_PATTERNS = (
    # Food
    r"\brecipes? for\b",
    r"\b(?:best|favourite|favorite|cheapest) (?:\w+ )?(?:pizza|burger|restaurant|dessert|food|topping)s?\b",
    r"\bpizza toppings?\b",
    r"\bwhere (?:should i |can i |to )eat\b",
    # Sport
    r"\b(?:football|soccer|basketball|nba|premier league|world cup) (?:team|club|player|match|score)s?\b",
    # Entertainment
    r"\b(?:watch|recommend|suggest) (?:me )?(?:a |an |some )?(?:good )?(?:movie|film|tv show|series|anime)s?\b",
    r"\b(?:song )?lyrics\b",
    r"\b(?:netflix|celebrity|celebrities)\b",
    # Personal life
    r"\b(?:girlfriend|boyfriend|dating|crush on|relationship advice)\b",
    r"\b(?:weather forecast|horoscope|zodiac)\b",
    # Money and shopping
    r"\b(?:stock tips?|stocks to buy|crypto(?:currency)?|bitcoin|lottery)\b",
    r"\bwhich\b.{0,40}\b(?:to|should i) buy\b",
    r"\bgaming (?:pc|laptop|console)s?\b",
    # Programming
    r"\b(?:python|javascript|typescript|html|css|sql)\b",
    r"\b(?:my|this) code\b",
    # History and other subjects
    r"\bworld war\b",
    r"\b(?:french|industrial|american|russian) revolution\b",
    # Doing the student's work for them
    r"\bwrite (?:me )?(?:an? )?(?:essay|poem|story|song|cover letter)\b",
    r"\b(?:do|take|write) my (?:exam|test|homework|assignment)\b",
)


def _term_pattern(terms: tuple[str, ...]) -> re.Pattern:
    # Plural endings are accepted on every term ("amperes", "oscilloscopes")
    return re.compile(
        r"\b("
        + "|".join(re.escape(term) for term in sorted(terms, key=len, reverse=True))
        + r")(?:s|es)?\b"
    )


_SYLLABUS_RE = _term_pattern(SYLLABUS_TERMS)
_EVERYDAY_RE = _term_pattern(EVERYDAY_TERMS)
_DENY_RES = tuple(re.compile(pattern) for pattern in DENY_PATTERNS)
_WHITESPACE_RE = re.compile(r"\s+")


def _normalize(message: str) -> str:
    return _WHITESPACE_RE.sub(" ", message.lower().replace("’", "'")).strip()


def _mentions_syllabus(text: str) -> bool:
    if _SYLLABUS_RE.search(text):
        return True
    return len({match.group(1) for match in _EVERYDAY_RE.finditer(text)}) >= 2


def classify_scope(message: str | None) -> ScopeDecision:
    """
    Decide whether a question is within the physics syllabus.

    Args:
        message: The latest user message; may be empty or None

    Returns:
        ScopeDecision with allowed=True, or allowed=False and the fixed refusal text
    """
    text = _normalize(message or "")
    if not text:
        return ScopeDecision(allowed=False, refusal=OUT_OF_SCOPE_REFUSAL)

    if any(pattern.search(text) for pattern in _DENY_RES):
        logger.info("[Scope] Refused deny-listed message: %r", text[:80])
        return ScopeDecision(allowed=False, refusal=OUT_OF_SCOPE_REFUSAL)

    if _mentions_syllabus(text):
        return ScopeDecision(allowed=True)

    logger.info("[Scope] Refused message with no syllabus terms: %r", text[:80])
    return ScopeDecision(allowed=False, refusal=OUT_OF_SCOPE_REFUSAL)
