# cookbookfs: versioned cookbook trees over a local repository and a Chef server.
