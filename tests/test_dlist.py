from workbench.kv.dlist import DList


class Conn(DList):
    def __init__(self, name):
        super().__init__()
        self.name = name


def names(head):
    return [n.name for n in head]


def test_new_list_is_empty():
    head = DList()
    assert head.empty()
    assert head.next is head and head.prev is head
    assert list(head) == []


def test_insert_before_head_appends():
    head = DList()
    for name in "abc":
        head.insert_before(Conn(name))
    assert not head.empty()
    assert names(head) == ["a", "b", "c"]
    assert head.prev.name == "c"
    assert head.next.name == "a"


def test_detach_middle():
    head = DList()
    nodes = [Conn(n) for n in "abcd"]
    for n in nodes:
        head.insert_before(n)
    nodes[1].detach()
    assert names(head) == ["a", "c", "d"]
    assert nodes[0].next is nodes[2]
    assert nodes[2].prev is nodes[0]


def test_detach_all_leaves_empty():
    head = DList()
    nodes = [Conn(n) for n in "xyz"]
    for n in nodes:
        head.insert_before(n)
    for n in head:
        n.detach()
    assert head.empty()


def test_move_to_back():
    head = DList()
    nodes = [Conn(n) for n in "abc"]
    for n in nodes:
        head.insert_before(n)
    nodes[0].detach()
    head.insert_before(nodes[0])
    assert names(head) == ["b", "c", "a"]