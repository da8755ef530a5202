"""Abstract wave propagation solver for the shallow water equations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum


class WetDryState(IntEnum):
    """The wet/dry state of a Riemann problem at one edge."""

    DRY_DRY = 0
    """Both cells are dry."""
    WET_WET = 1
    """Both cells are wet."""
    WET_DRY_INUNDATION = 2
    """1st cell wet, 2nd dry; the 1st cell lies higher than the 2nd."""
    WET_DRY_WALL = 3
    """1st cell wet, 2nd dry; 1st lies lower and momentum cannot overcome the step."""
    WET_DRY_WALL_INUNDATION = 4
    """1st cell wet, 2nd dry; 1st lies lower and momentum overcomes the step."""
    DRY_WET_INUNDATION = 5
    """1st cell dry, 2nd wet; the 1st cell lies lower than the 2nd."""
    DRY_WET_WALL = 6
    """1st cell dry, 2nd wet; 1st lies higher and momentum cannot overcome the step."""
    DRY_WET_WALL_INUNDATION = 7
    """1st cell dry, 2nd wet; 1st lies higher and momentum overcomes the step."""


@dataclass(frozen=True)
class NetUpdates:
    """Net updates for the cells on both sides of an edge."""

    h_update_left: float
    h_update_right: float
    hu_update_left: float
    hu_update_right: float
    max_wave_speed: float


class WavePropagationSolver(ABC):
    """Base class of edge-local wave propagation solvers.

    Subclasses decide the wet/dry state of an edge and compute its net updates.
    """

    def __init__(self, dry_tolerance: float, gravity: float, zero_tolerance: float) -> None:
        self.dry_tol = dry_tolerance
        self.gravity = gravity
        self.zero_tol = zero_tolerance

        self.wet_dry_state: WetDryState | None = None
        self.h_left = 0.0
        self.h_right = 0.0
        self.hu_left = 0.0
        self.hu_right = 0.0
        self.b_left = 0.0
        self.b_right = 0.0
        self.u_left = 0.0
        self.u_right = 0.0

    def store_parameters(
        self,
        h_left: float,
        h_right: float,
        hu_left: float,
        hu_right: float,
        b_left: float,
        b_right: float,
        u_left: float | None = None,
        u_right: float | None = None,
    ) -> None:
        """Store the edge-local values; velocities are kept unless given."""
        self.h_left = h_left
        self.h_right = h_right
        self.hu_left = hu_left
        self.hu_right = hu_right
        self.b_left = b_left
        self.b_right = b_right
        if u_left is not None:
            self.u_left = u_left
        if u_right is not None:
            self.u_right = u_right

    @abstractmethod
    def determine_wet_dry_state(self) -> WetDryState:
        """Determine the wet/dry state and adjust the stored values if needed."""

    @abstractmethod
    def compute_net_updates(
        self,
        h_left: float,
        h_right: float,
        hu_left: float,
        hu_right: float,
        b_left: float,
        b_right: float,
    ) -> NetUpdates:
        """Compute net updates for the cells on the left and right of the edge."""