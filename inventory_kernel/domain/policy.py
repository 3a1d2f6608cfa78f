"""
Store behaviour switches (``inventory_kernel.domain.policy``).

The defaults reproduce the reference behaviour exactly.  Each switch turns
on a cleanup that the reference leaves undone; they are opt-in because the
intended behaviour is ambiguous and changing it silently would alter the
audit trail.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StorePolicy:
    """
    Contract: frozen; built by ``inventory_config`` from a configuration set,
    or constructed directly in tests.

    release_seats_on_asset_delete:
        When True, deleting an asset releases every seat assigned to it.
    prune_dangling_seat_refs:
        When True, deleting a master license also removes its seat ids
        from every asset's ``assigned_licenses``.
    clamp_stock_quantities:
        When True, checkout/check-in results are clamped to
        ``[0, total_qty]`` instead of being applied verbatim.
    """
    release_seats_on_asset_delete: bool = False
    prune_dangling_seat_refs: bool = False
    clamp_stock_quantities: bool = False


REFERENCE_POLICY = StorePolicy()
