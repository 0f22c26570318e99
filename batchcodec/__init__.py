"""
# Batch charset conversion for record oriented files.

A batch file is a sequence of records laid out following one of six layouts,
each one belonging to a family that decides how the stream is cut:

 1. whole-file: there is no record at all, the file is converted as a single unit
 2. fixed-mixed: 380 units long records (bytes, or characters when the source is UTF-8)
    containing single-width and double-width fields at fixed positions
 3. variable-framed: self describing blocks prefixed by their block and record lengths

Converting a file means

 1. framing: cut the next record from the input stream
 2. transforming: split the record in fragments, single-width ones and double-width
    ones, and convert each fragment between the source and the target charset
 3. writing: append the concatenation of the fragments, in the same order, to the output

A run can be in one of the following states

 1. INIT
 2. STREAMING
 3. COMPLETED
 4. ABORTED

and the first error met aborts it: what was already written stays written.
"""
