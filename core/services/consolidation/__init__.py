from .grouper import DEFAULT_WINDOW_DAYS, GreedyChainGrouper, consolidate, find_chain_for, group_by_day

__all__ = ["GreedyChainGrouper", "DEFAULT_WINDOW_DAYS", "consolidate", "find_chain_for", "group_by_day"]
