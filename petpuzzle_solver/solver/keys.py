"""Canonical state keys for memoization.

A key is a nested tuple holding every field that can change future legal
moves or solve effects. Entities are sorted by id or position, so two
snapshots listing the same entities in a different order get equal keys.
Keys are compared with exact tuple equality inside dicts; the hash is only a
bucket index.
"""

from typing import Hashable, Tuple

from ..puzzle.state import Pet, PuzzleState


def _pet_key(pet: Pet) -> Tuple:
    s = pet.special
    return (
        pet.pet_id,
        pet.color.value,
        pet.positions,
        tuple(c.value for c in s.layer_colors),
        s.ice_count,
        s.hidden_count,
        s.count,
        s.lock_color.value,
        s.key_color.value,
        s.has_scissor,
        s.is_single_direction,
        s.time_explode,
    )


def state_key(state: PuzzleState) -> Hashable:
    """
    Build the canonical key of a snapshot.

    Covers pets (id, color, body, modifiers), boxes, crate counters, stone
    walls, color walls, exits, tree-root lengths and ribbon anchors. The
    grid, colored paths and obstacles never change during a solve and are
    left out.
    """
    return (
        tuple(sorted((_pet_key(p) for p in state.pets), key=lambda k: k[0])),
        tuple(sorted((b.box_id, b.positions) for b in state.boxes)),
        tuple(sorted((c.crate_id, c.required_solves) for c in state.crates)),
        tuple(sorted((s.position, s.count, s.ice_count) for s in state.stone_walls)),
        tuple(sorted((w.position, w.color.value) for w in state.color_walls)),
        tuple(sorted(
            (
                e.position, e.color.value, e.special.count, e.special.ice_count,
                tuple(c.value for c in e.special.layer_colors), e.special.is_permanent,
            )
            for e in state.exits
        )),
        tuple(sorted((r.root_id, r.length) for r in state.tree_roots)),
        state.ribbon.anchors,
    )
