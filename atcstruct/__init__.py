"""
# atcstruct: the ATC file format for humans.

We can define a file format as a way of describing a binary representation of something
digital, where each subcomponent of the file format aims to represent a specific aspect
of the digital artefact.

A format is described declaratively: a Chunk is a class whose attributes are
Fields (or other Chunks), and unpack() walks them in order of declaration
reading from a Stream; each field knows how many bytes it needs to read
to finalize its representation, possibly depending on the value of other
fields (see properties.Dependency).

An instance representing a file format can be in one of the following states

 1. INIT
 2. UNPACKING
 3. DONE
 4. ERROR

Writing files is not supported: the representation is read-only.

The ATC container lives in atcstruct.ecg.atc, with atcstruct.ecg.atc.document
giving the high level view of a recording.
"""
