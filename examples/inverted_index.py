"""
Inverted index MapReduce example.
Creates an index mapping each word to the documents/lines it appears in.
"""


def reduce_function(key, values):
    """
    Reduce function: collect all document IDs for a word.

    Args:
        key: Word
        values: List of document IDs

    Returns:
        Comma-separated unique document IDs
    """
    # Remove duplicates and sort
    unique_docs = sorted(set(values))
    return ','.join(unique_docs)
