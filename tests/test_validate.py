"""Tests for structural validation of expression trees."""

import pytest

from mathexpr._errors import MalformedTreeError
from mathexpr._tree import Binary, BinOp, ExprRef, ExprTree, Num, Var
from mathexpr._validate import validate_tree


class TestValidateTree:
    def test_single_literal(self) -> None:
        tree = ExprTree()
        root = tree.num(1.0)
        assert validate_tree(tree, [root]) == [root]

    def test_operands_before_users(self) -> None:
        tree = ExprTree()
        root = tree.binary(BinOp.ADD, tree.num(2.0), tree.num(3.0))
        assert validate_tree(tree, [root]) == [ExprRef(0), ExprRef(1), ExprRef(2)]

    def test_forward_references_are_allowed(self) -> None:
        # Root first, operands after: valid as long as there is no cycle
        tree = ExprTree(nodes=[Binary(BinOp.MUL, ExprRef(1), ExprRef(2)), Num(2.0), Var("a")])
        assert validate_tree(tree, [ExprRef(0)]) == [ExprRef(1), ExprRef(2), ExprRef(0)]

    def test_unreachable_nodes_are_ignored(self) -> None:
        tree = ExprTree(nodes=[Num(1.0), Binary(BinOp.ADD, ExprRef(0), ExprRef(9))])
        assert validate_tree(tree, [ExprRef(0)]) == [ExprRef(0)]

    def test_shared_subtree_listed_once(self) -> None:
        tree = ExprTree()
        x = tree.var("x")
        square = tree.binary(BinOp.MUL, x, x)
        root = tree.binary(BinOp.ADD, square, square)
        assert validate_tree(tree, [root]) == [x, square, root]

    def test_equality_roots(self) -> None:
        tree = ExprTree()
        lhs = tree.var("y")
        rhs = tree.binary(BinOp.MUL, tree.num(2.0), tree.var("x"))
        order = validate_tree(tree, [lhs, rhs])
        assert set(order) == set(tree.refs())
        assert order[-1] == rhs

    def test_out_of_bounds_root(self) -> None:
        tree = ExprTree()
        tree.num(1.0)
        with pytest.raises(MalformedTreeError, match="from the formula root is out of bounds"):
            validate_tree(tree, [ExprRef(3)])

    def test_dangling_operand(self) -> None:
        tree = ExprTree(nodes=[Num(1.0), Binary(BinOp.ADD, ExprRef(0), ExprRef(9))])
        with pytest.raises(MalformedTreeError, match=r"#9 from node #1"):
            validate_tree(tree, [ExprRef(1)])

    def test_self_cycle(self) -> None:
        tree = ExprTree(nodes=[Binary(BinOp.ADD, ExprRef(0), ExprRef(0))])
        with pytest.raises(MalformedTreeError, match="Cycle"):
            validate_tree(tree, [ExprRef(0)])

    def test_longer_cycle(self) -> None:
        tree = ExprTree(
            nodes=[
                Binary(BinOp.ADD, ExprRef(1), ExprRef(3)),
                Binary(BinOp.MUL, ExprRef(2), ExprRef(3)),
                Binary(BinOp.SUB, ExprRef(0), ExprRef(3)),
                Num(1.0),
            ],
        )
        with pytest.raises(MalformedTreeError, match="Cycle"):
            validate_tree(tree, [ExprRef(0)])

    def test_builder_trees_are_always_valid(self) -> None:
        tree = ExprTree()
        root = tree.num(1.0)
        for i in range(20):
            root = tree.binary(BinOp.ADD, root, tree.num(float(i)))
        assert len(validate_tree(tree, [root])) == len(tree)
