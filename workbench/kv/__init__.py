"""Parts of an in-memory key-value store: AVL tree, linked list, thread pool and wire format."""