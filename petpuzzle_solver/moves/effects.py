"""Consequences of a pet reaching an exit."""

from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from ..puzzle.state import (
    Cell, ColorWall, Exit, KeyLockColor, Pet, PetModifiers, PuzzleState,
)


@dataclass
class SolveEffect:
    """Result of applying the solve rules."""
    state: PuzzleState
    # Color walls removed by this solve, for presentation only
    removed_walls: List[ColorWall] = field(default_factory=list)


def apply_global_decay(state: PuzzleState) -> PuzzleState:
    """
    Apply the rules that trigger on every solve, whoever solved.

    Ice on pets and exits, crate counters, hidden counters, stone walls and
    tree roots all lose one. Crates, stones and roots reaching zero go away.
    """
    pets = tuple(
        replace(p, special=replace(
            p.special,
            ice_count=max(0, p.special.ice_count - 1),
            hidden_count=max(0, p.special.hidden_count - 1),
        ))
        if p.special.ice_count > 0 or p.special.hidden_count > 0 else p
        for p in state.pets
    )
    exits = tuple(
        replace(e, special=replace(e.special, ice_count=e.special.ice_count - 1))
        if e.special.ice_count > 0 else e
        for e in state.exits
    )
    crates = tuple(
        c2 for c2 in (
            replace(c, required_solves=c.required_solves - 1) if c.required_solves > 0 else c
            for c in state.crates
        )
        if c2.required_solves != 0
    )
    stones = tuple(
        replace(s, count=s.count - 1) for s in state.stone_walls if s.count - 1 > 0
    )
    roots = tuple(
        replace(r, length=r.length - 1) for r in state.tree_roots if r.length - 1 > 0
    )
    return state.evolve(
        pets=pets, exits=exits, crates=crates, stone_walls=stones, tree_roots=roots,
    )


def _release_key(pets: Sequence[Pet], solved: Pet) -> Tuple[Pet, ...]:
    """Unlock every lock of the solved pet's key color if it held the last such key."""
    key = solved.special.key_color
    if key == KeyLockColor.UNKNOWN:
        return tuple(pets)
    if any(p.pet_id != solved.pet_id and p.special.key_color == key for p in pets):
        return tuple(pets)

    released = []
    for pet in pets:
        if pet.special.lock_color == key:
            pet = replace(pet, special=replace(pet.special, lock_color=KeyLockColor.UNKNOWN))
        released.append(pet)
    return tuple(released)


def _count_pets_presenting(state: PuzzleState, pet: Pet) -> int:
    return sum(1 for p in state.pets if p.presents_color(pet.color))


def apply_solve_effects(
    state: PuzzleState,
    pet: Pet,
    solved_exit: Exit,
    previous_positions: Sequence[Cell],
) -> SolveEffect:
    """
    Apply every consequence of ``pet`` entering ``solved_exit``.

    Args:
        state: Snapshot with the pet already standing on the exit
        pet: The solving pet, as found in ``state``
        solved_exit: The exit that was entered
        previous_positions: The pet's body before its final step

    Returns:
        SolveEffect with the new snapshot and any removed color walls
    """
    if state.find_pet(pet.pet_id) is None:
        return SolveEffect(state)

    before = state
    state = apply_global_decay(state)

    # Keys and scissors
    pets = _release_key(state.pets, pet)
    if pet.special.has_scissor:
        state = state.evolve(ribbon=replace(state.ribbon, anchors=()))

    # Pet hit counter: 0 behaves like a single hit
    index = next(i for i, p in enumerate(pets) if p.pet_id == pet.pet_id)
    current = pets[index]
    hits_left = pet.special.count - 1 if pet.special.count > 0 else 0
    consumed = hits_left <= 0

    if not consumed:
        survivor = replace(
            current,
            positions=(solved_exit.position,),
            special=replace(current.special, count=hits_left),
        )
        pets = pets[:index] + (survivor,) + pets[index + 1:]
    elif pet.special.layer_colors:
        morphed = Pet(
            pet_id=pet.pet_id,
            positions=tuple(previous_positions),
            color=pet.special.layer_colors[0],
            special=PetModifiers(layer_colors=pet.special.layer_colors[1:]),
        )
        pets = pets[:index] + (morphed,) + pets[index + 1:]
    else:
        pets = pets[:index] + pets[index + 1:]

    # Exit hit counter: 0 behaves like a single use
    exits = list(state.exits)
    for i, ex in enumerate(exits):
        if ex.position != solved_exit.position:
            continue
        uses_left = (ex.special.count if ex.special.count > 0 else 1) - 1
        if uses_left > 0 or ex.special.is_permanent:
            exits[i] = replace(ex, special=replace(ex.special, count=uses_left))
        elif ex.special.layer_colors:
            exits[i] = replace(
                ex,
                color=ex.special.layer_colors[0],
                special=replace(ex.special, count=1, layer_colors=ex.special.layer_colors[1:]),
            )
        else:
            del exits[i]
        break

    state = state.evolve(pets=pets, exits=tuple(exits))

    # Color walls fall once the last pet able to show this color is consumed
    removed_walls: List[ColorWall] = []
    if consumed and _count_pets_presenting(before, pet) == 1:
        removed_walls = [w for w in before.color_walls if w.color == pet.color]
        if removed_walls:
            gone = {w.position for w in removed_walls}
            state = state.evolve(
                color_walls=tuple(w for w in state.color_walls if w.position not in gone)
            )

    return SolveEffect(state, removed_walls)
