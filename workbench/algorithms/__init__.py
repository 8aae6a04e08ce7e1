"""Textbook algorithms: binary search, sorting, recursion exercises and hash tables."""