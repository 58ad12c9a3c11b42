# SPDX-License-Identifier: GPL-2.0-or-later
"""In-memory stand-in for a python-hivex Hivex handle (node/value ids are ints, 0 = none)."""


class FakeHivex:
    def __init__(self):
        self._next = 1
        self.nodes = {}    # nid -> {"name", "parent", "children": {lower: nid}, "values": {lower: vid}}
        self.values = {}   # vid -> (key, type, bytes)
        self.commits = 0
        self.closed = False
        self._root = self._new_node("ROOT", 0)

    def _id(self):
        i = self._next
        self._next += 1
        return i

    def _new_node(self, name, parent):
        nid = self._id()
        self.nodes[nid] = {"name": name, "parent": parent, "children": {}, "values": {}}
        return nid

    # -- hivex API subset ---------------------------------------------------

    def root(self):
        return self._root

    def node_name(self, nid):
        return self.nodes[nid]["name"]

    def node_get_child(self, nid, name):
        return self.nodes[nid]["children"].get(name.lower(), 0)

    def node_add_child(self, nid, name):
        child = self._new_node(name, nid)
        self.nodes[nid]["children"][name.lower()] = child
        return child

    def node_children(self, nid):
        return list(self.nodes[nid]["children"].values())

    def node_get_value(self, nid, key):
        return self.nodes[nid]["values"].get(key.lower(), 0)

    def node_set_value(self, nid, val):
        vid = self._id()
        self.values[vid] = (val["key"], val["t"], val["value"])
        self.nodes[nid]["values"][val["key"].lower()] = vid

    def value_value(self, vid):
        _key, t, raw = self.values[vid]
        return t, raw

    def node_delete_child(self, nid):
        if nid == self._root:
            raise RuntimeError("cannot delete root")
        parent = self.nodes[nid]["parent"]
        self.nodes[parent]["children"] = {k: v for k, v in self.nodes[parent]["children"].items() if v != nid}
        stack = [nid]
        while stack:
            cur = stack.pop()
            stack.extend(self.nodes[cur]["children"].values())
            del self.nodes[cur]

    def commit(self, _filename):
        self.commits += 1

    def close(self):
        self.closed = True

    # -- test helpers -------------------------------------------------------

    def path_exists(self, *parts):
        nid = self._root
        for p in parts:
            nid = self.node_get_child(nid, p)
            if nid == 0:
                return False
        return True
