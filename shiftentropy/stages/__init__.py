"""Stage runners — read parquet, call core, write parquet."""
