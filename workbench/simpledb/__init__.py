"""A single-table database stored as a B-tree of fixed-size pages, with an interactive shell."""