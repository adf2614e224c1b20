"""
Department Matcher Utility.

Decides whether the department printed on an appointment pass refers to
the department a reception terminal is configured for.

Matching is deliberately permissive: case-insensitive substring
containment in either direction, so "Immigration" matches
"Department of Immigration and Emigration". No edit-distance scoring.
"""


class DepartmentMatcher:
    """Utility class for department label matching."""

    @staticmethod
    def normalize(name: str) -> str:
        """
        Normalize a department label for comparison.

        Args:
            name: Department label

        Returns:
            Lowercased label with surrounding whitespace removed
        """
        return (name or '').strip().lower()

    @staticmethod
    def isMatch(payloadDepartment: str, terminalDepartment: str) -> bool:
        """
        Check if two department labels refer to the same department.

        Symmetric: isMatch(a, b) == isMatch(b, a).

        Args:
            payloadDepartment: Department from the appointment pass
            terminalDepartment: Department configured on the terminal

        Returns:
            True if either normalized label contains the other
        """
        a = DepartmentMatcher.normalize(payloadDepartment)
        b = DepartmentMatcher.normalize(terminalDepartment)

        # An empty label would be contained in everything
        if not a or not b:
            return False

        return b in a or a in b
