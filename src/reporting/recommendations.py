class Recommendations:
    _MAP = {
        # Resolution
        "QUERY_FAILURE": (
            "The live lookup failed (NXDOMAIN, timeout or transport error). Confirm the record was published, "
            "that the zone is delegated to the provider holding it, and that the resolver in use can reach it. "
            "Newly created names may need a few minutes to propagate."
        ),
        "GROUP_CHECK_CRASHED": "The record set could not be checked. Re-run with --debug and inspect the log for the underlying error.",

        # Comparison
        "VALUE_MISMATCH": (
            "Live answers differ from the declared values. Apply the declared configuration again or update it "
            "to reflect the intended state; if the change was just applied, wait for caches to expire and re-check."
        ),
        "TTL_EXCEEDED": (
            "Values match but the live TTL is longer than declared. The published TTL may not have been updated, "
            "or an intermediate cache still holds the old record set."
        ),

        # Aliases
        "UNVERIFIABLE_ALIAS": (
            "The alias target is not an ELB, S3 website or CloudFront endpoint, so it cannot be verified independently. "
            "Check the target manually if it matters."
        ),

        # Wildcards
        "WILDCARD_COLLISION": (
            "This record answers exactly like a wildcard covering it. If the explicit record is redundant, remove it; "
            "if it is meant to differ from the wildcard, its live value has not changed yet."
        ),
    }

    @classmethod
    def recommend(cls, issue: str) -> str:
        return cls._MAP.get(issue, "No recommendation available for this issue yet.")
