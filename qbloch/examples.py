EXAMPLES = {
    "2-qubit Bell (|Φ+⟩)": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[2];\nh q[0];\ncx q[0],q[1];\n"""
    ),
    "3-qubit GHZ": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[3];\nh q[0];\ncx q[0],q[1];\ncx q[1],q[2];\n"""
    ),
    "3-qubit product state (rotations)": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[3];\nrx(0.8) q[0];\nry(1.1) q[1];\nrz(1.6) q[2];\n"""
    ),
    "4-qubit entangled chain": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[4];\nh q[0];\ncx q[0],q[1];\ncx q[1],q[2];\ncx q[2],q[3];\n"""
    ),
    "5-qubit error correction": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[5];\nh q[0];\ncx q[0],q[1];\ncx q[1],q[2];\n"""
        """cx q[2],q[3];\ncx q[3],q[4];\nh q[0];\nh q[1];\nh q[2];\nh q[3];\nh q[4];\n"""
    ),
    "Mixed state example": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[3];\nh q[0];\ncx q[0],q[1];\nrx(0.5) q[2];\n"""
        """ry(0.3) q[0];\ncz q[1],q[2];\n"""
    ),
    "Advanced entanglement": (
        """OPENQASM 2.0;\ninclude \"qelib1.inc\";\nqreg q[4];\nh q[0];\ncx q[0],q[1];\ncx q[1],q[2];\n"""
        """cx q[2],q[3];\nh q[1];\nh q[2];\ncx q[0],q[3];\n"""
    ),
}

DEFAULT_EXAMPLE = "2-qubit Bell (|Φ+⟩)"
