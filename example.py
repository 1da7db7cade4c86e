"""Example usage of the slot_layout library."""

from slot_layout import LayoutConfig, Schema

# Struct definitions as they appear in a contract
structs = """
struct Pool {
    address token0;
    address token1;
    uint24 fee;
    int24 tickSpacing;
    mapping(address => uint256) balances;
}

struct Position {
    Pool pool;
    address payable owner;
    uint128 liquidity;
    int24[2] ticks;
    bool active;
}
"""

schema = Schema.parse(structs, LayoutConfig(show_fields=True))

for result in schema.results():
    print(f"{result.name}: {result.slots} slot(s), {result.bits} bits")
    for p in result.placements:
        print(f"  {p.name:<12} {str(p.sol_type):<30} slot {p.slot}, offset {p.offset_bits}")
