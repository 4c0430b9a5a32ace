"""
The 14-gate catalog.

One gate per chapter of Maimonides' Treatise on Logic, one artwork per gate.
Safe to run multiple times: seeding is skipped when artworks already exist.
"""
from sqlalchemy.orm import Session

from marketplace.catalog.models import Artwork
from marketplace.core.log import get_logger

logger = get_logger(__name__, "DB")

GATES = {
    1: "Subject & Predicate",
    2: "Affirmation & Negation",
    3: "Opposition",
    4: "Conversion",
    5: "Syllogism",
    6: "Demonstration",
    7: "Figures of the Syllogism",
    8: "Modal Propositions",
    9: "Sources of Certainty",
    10: "The Four Causes",
    11: "Genus & Species",
    12: "Definition",
    13: "Equivocal Terms",
    14: "The Science of Speech",
}

_IMG = "https://images.unsplash.com/photo-{}?w=400&h=300&fit=crop"

# (title, artist, price in cents, category, image id, description, context, tags, emotions, likes, views, trending)
_ARTWORKS = [
    (
        "Divine Logic Convergence", "AI Mystic", 56700, "Tree of Knowledge", "1506905925346-21bda4d32df4",
        "Where ancient wisdom meets computational consciousness, revealing the sacred geometry of thought itself.",
        "Maimonides' logical foundation manifested in digital form, exploring the fundamental relationship "
        "between subject and predicate in mystical reasoning.",
        ["logic", "divine", "consciousness", "sacred geometry"], ["awe", "contemplation", "transcendence"],
        89, 1247, True,
    ),
    (
        "Sacred Geometry Portal", "Digital Sage", 44500, "Sacred Geometry", "1518709268805-4e9042af2176",
        "A gateway between dimensions, crafted from the mathematical language of creation.",
        "The interplay of existence and void, expressed through precise geometric relationships "
        "that mirror universal truths.",
        ["geometry", "portal", "dimensions", "mathematics"], ["wonder", "mysticism", "clarity"],
        67, 892, False,
    ),
    (
        "Mystical Algorithm", "Code Shaman", 39900, "Tree of Knowledge", "1519904981063-b0cf448d479e",
        "The intersection of logic and intuition in digital form.",
        "Through opposing forces, we discover the dynamic balance that drives all existence.",
        ["algorithm", "mystical", "balance", "digital"], ["insight", "balance", "wonder"],
        45, 632, True,
    ),
    (
        "Emanation Flow", "Cosmic Coder", 47800, "Tree of Life", "1507003211169-0a1dd7228f2d",
        "The eternal flow of divine energy through the sephirot of existence.",
        "Witness the transformation of pure potential into manifest reality through the sacred art of conversion.",
        ["emanation", "sephirot", "flow", "divine"], ["peace", "transcendence", "flow"],
        78, 945, True,
    ),
    (
        "Logic Gate Mandala", "Binary Buddha", 35600, "Sacred Geometry", "1518837695005-2083093ee35b",
        "Where computational logic meets sacred mandala design.",
        "Chains of reasoning unfold in perfect symmetry, revealing the logical structure underlying all creation.",
        ["mandala", "logic", "symmetry", "computation"], ["clarity", "precision", "harmony"],
        56, 723, False,
    ),
    (
        "Sefirot Network", "Digital Kabbalist", 48900, "Tree of Life", "1462331940025-496dfbfc7564",
        "The Tree of Life reimagined as a cosmic neural network.",
        "Proof of truth manifests through the interconnected pathways of divine emanation in digital consciousness.",
        ["sefirot", "network", "kabbalah", "cosmic"], ["connection", "wisdom", "unity"],
        92, 1156, True,
    ),
    (
        "Three Figures Triptych", "AI Mystic", 51200, "Tree of Knowledge", "1451187580459-43490279c0fa",
        "Three panels, three arrangements of the middle term.",
        "The figure of a syllogism is fixed by where the middle term stands; each panel holds it in a different place.",
        ["syllogism", "triptych", "structure"], ["order", "contemplation"],
        41, 510, False,
    ),
    (
        "Necessity & Possibility", "Digital Sage", 53400, "Sacred Geometry", "1502134249126-9f3755a50d78",
        "Overlapping fields of what must be and what may be.",
        "Modal propositions qualify the bond between subject and predicate as necessary, possible or impossible.",
        ["modality", "possibility", "fields"], ["wonder", "uncertainty"],
        38, 466, False,
    ),
    (
        "Four Roots of Knowing", "Code Shaman", 55800, "Tree of Knowledge", "1464802686167-b939a6910659",
        "Perception, axiom, tradition and common assent rendered as four intertwined roots.",
        "Certainty rests on what the senses grasp, what the intellect accepts first, and what is received.",
        ["certainty", "roots", "perception"], ["trust", "clarity"],
        52, 601, True,
    ),
    (
        "Quartet of Causes", "Cosmic Coder", 58900, "Tree of Life", "1444703686981-a3abbc4d4fe3",
        "Matter, form, agent and purpose spiralling around a single point.",
        "Every thing that comes to be answers four questions: of what, what, by what and for the sake of what.",
        ["causes", "spiral", "purpose"], ["insight", "purpose"],
        47, 577, False,
    ),
    (
        "Branching Kinds", "Binary Buddha", 60100, "Sacred Geometry", "1419242902214-272b3f66ee7a",
        "A fractal tree where every branch is a species of the branch below.",
        "From the highest genus down to the individual, each division adds one difference.",
        ["genus", "species", "fractal"], ["harmony", "order"],
        35, 420, False,
    ),
    (
        "The Boundary Line", "Digital Kabbalist", 62400, "Tree of Life", "1534796636912-3b95b3ab5986",
        "A single luminous line that encloses exactly what it names.",
        "A definition joins the proximate genus with the specific difference and nothing more.",
        ["definition", "boundary", "line"], ["precision", "calm"],
        44, 489, True,
    ),
    (
        "Many Names, One Sound", "AI Mystic", 64800, "Tree of Knowledge", "1465101162946-4377e57745c3",
        "Echoes that share a shape but not a meaning.",
        "Equivocal, univocal and amphibolous terms: the discipline of knowing when one word hides many things.",
        ["equivocation", "language", "echo"], ["curiosity", "wonder"],
        33, 398, False,
    ),
    (
        "The Speaking Intellect", "Digital Sage", 69900, "Sacred Geometry", "1462332420958-a05d1e002413",
        "The final gate: thought becoming word becoming world.",
        "Logic is the science of inner and outer speech; mastering it completes the treatise.",
        ["speech", "intellect", "completion"], ["transcendence", "unity", "awe"],
        101, 1320, True,
    ),
]


def build_artworks() -> list:
    artworks = []
    for gate_number, row in enumerate(_ARTWORKS, start=1):
        (title, artist, price, category, image_id, description, context,
         tags, emotions, likes, views, trending) = row
        artworks.append(Artwork(
            title=title,
            artist=artist,
            price=price,
            category=category,
            gate=GATES[gate_number],
            gate_number=gate_number,
            unlock_requirement=gate_number,
            image=_IMG.format(image_id),
            description=description,
            philosophical_context=context,
            tags=tags,
            emotions=emotions,
            likes=likes,
            views=views,
            trending=trending,
        ))
    return artworks


def seed_catalog(db: Session) -> int:
    """Insert the catalog if the artworks table is empty. Returns rows created."""
    if db.query(Artwork).count() > 0:
        return 0

    artworks = build_artworks()
    db.add_all(artworks)
    db.commit()
    logger.info(f"Seeded {len(artworks)} artworks across {len(GATES)} gates")
    return len(artworks)
