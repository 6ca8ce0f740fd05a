"""
Classic MapReduce word count example.
Counts the frequency of each word in the input text.
"""


def reduce_function(key, values):
    """
    Reduce function: sum all counts for a word.

    Args:
        key: Word
        values: List of counts as strings

    Returns:
        Total count as a string
    """
    return str(sum(int(v) for v in values))
